"""
Set Scale dialog for MeasureLabel
"""
from tkinter import messagebox
from typing import Optional
import logging
import customtkinter as ctk

from measurelabel.core.image_document import Calibration


class CalibrationDialog:
    """Modal dialog mapping a known pixel distance to a physical distance"""

    def __init__(self, parent, calibration: Calibration, distance_px: Optional[float] = None):
        self.logger = logging.getLogger(__name__)
        self.parent = parent
        self.calibration = calibration
        self.distance_px = distance_px
        self.result: Optional[Calibration] = None
        self.dialog = None

    def show(self) -> Optional[Calibration]:
        """Show the dialog; returns the new calibration or None if cancelled"""
        self.dialog = ctk.CTkToplevel(self.parent)
        self.dialog.title("Set Scale")
        self.dialog.geometry("360x300")
        self.dialog.transient(self.parent)
        self.dialog.grab_set()

        self.dialog.update_idletasks()
        x = (self.dialog.winfo_screenwidth() // 2) - (360 // 2)
        y = (self.dialog.winfo_screenheight() // 2) - (300 // 2)
        self.dialog.geometry(f"360x300+{x}+{y}")

        self._create_widgets()
        self.dialog.wait_window()
        return self.result

    def _create_widgets(self):
        frame = ctk.CTkFrame(self.dialog)
        frame.pack(fill='both', expand=True, padx=20, pady=20)
        frame.grid_columnconfigure(1, weight=1)

        if self.distance_px is not None:
            pixels = self.distance_px
            known = self.calibration.get_x(self.distance_px) if self.calibration.scaled() else 0
        else:
            pixels = 1.0 / self.calibration.pixel_width if self.calibration.scaled() else 0
            known = 1 if self.calibration.scaled() else 0
        unit = self.calibration.get_unit() if self.calibration.scaled() else "µm"

        rows = [
            ("Distance in pixels", f"{pixels:.4g}"),
            ("Known distance", f"{known:.4g}"),
            ("Unit of length", unit),
        ]
        self.entries = []
        for row, (text, value) in enumerate(rows):
            ctk.CTkLabel(frame, text=text).grid(row=row, column=0, sticky="w", padx=10, pady=8)
            entry = ctk.CTkEntry(frame, width=140)
            entry.insert(0, value)
            entry.grid(row=row, column=1, sticky="ew", padx=10, pady=8)
            self.entries.append(entry)

        buttons = ctk.CTkFrame(frame, fg_color="transparent")
        buttons.grid(row=len(rows), column=0, columnspan=2, pady=(20, 10))

        ctk.CTkButton(buttons, text="Remove Scale", command=self._remove_clicked,
                      width=100, fg_color="#757575", hover_color="#616161").pack(side='left', padx=4)
        ctk.CTkButton(buttons, text="OK", command=self._ok_clicked, width=80).pack(side='left', padx=4)
        ctk.CTkButton(buttons, text="Cancel", command=self.dialog.destroy, width=80).pack(side='left', padx=4)

    def _ok_clicked(self):
        try:
            distance_px = float(self.entries[0].get())
            known_distance = float(self.entries[1].get())
            unit = self.entries[2].get().strip()
            self.result = Calibration.from_known_distance(distance_px, known_distance, unit)
        except ValueError as e:
            self.logger.error(f"Invalid scale: {e}")
            messagebox.showerror("Invalid Scale", f"Could not set scale: {e}", parent=self.dialog)
            return
        self.logger.info(f"Scale set: {self.result.pixel_width:.6g} {self.result.get_unit()}/pixel")
        self.dialog.destroy()

    def _remove_clicked(self):
        self.result = Calibration()
        self.logger.info("Scale removed")
        self.dialog.destroy()
