"""
File dialog utilities for MeasureLabel
"""
from tkinter import filedialog, messagebox
from pathlib import Path
from typing import Optional
import logging


class FileDialogs:
    """File dialog utilities for opening images and choosing export targets"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def select_image_file(self, title: str = "Select Image File") -> Optional[Path]:
        """
        Open image file selection dialog

        Args:
            title: Dialog window title

        Returns:
            Selected image file path or None if cancelled
        """
        try:
            filetypes = [
                ("Image files", "*.tif *.tiff *.png *.jpg *.jpeg *.bmp *.gif"),
                ("TIFF files", "*.tif *.tiff"),
                ("PNG files", "*.png"),
                ("JPEG files", "*.jpg *.jpeg"),
                ("All files", "*.*")
            ]

            filename = filedialog.askopenfilename(
                title=title,
                filetypes=filetypes
            )

            if filename:
                return Path(filename)
            return None
        except Exception as e:
            self.logger.error(f"Error selecting image file: {e}")
            messagebox.showerror("Error", f"Failed to select image file: {e}")
            return None

    def select_save_file(self, title: str, extension: str,
                         description: str, initial_dir: Optional[Path] = None) -> Optional[Path]:
        """
        Open save-as dialog

        Args:
            title: Dialog window title
            extension: Default extension without the dot, e.g. "png"
            description: File type description shown in the dialog
            initial_dir: Directory the dialog starts in

        Returns:
            Chosen path or None if cancelled
        """
        try:
            filename = filedialog.asksaveasfilename(
                title=title,
                defaultextension=f".{extension}",
                initialdir=str(initial_dir) if initial_dir else None,
                filetypes=[
                    (description, f"*.{extension}"),
                    ("All files", "*.*")
                ]
            )
            if filename:
                return Path(filename)
            return None
        except Exception as e:
            self.logger.error(f"Error selecting save file: {e}")
            messagebox.showerror("Error", f"Failed to select file: {e}")
            return None
