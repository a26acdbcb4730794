"""
ROI properties dialog for MeasureLabel - live restyling of the measured line and its label
"""
import tkinter as tk
from typing import Dict
import customtkinter as ctk

from measurelabel.core.dialog_model import FIELDS, DialogModel
from measurelabel.core.style import StyleSettings


class StyleDialog(DialogModel):
    """
    Non-modal dialog whose every change is applied to the image immediately

    The main window stays interactive while it is open; show_dialog() returns
    once the user presses OK, Cancel or closes the window.
    """

    WIDTH = 380
    HEIGHT = 460

    def __init__(self, settings: StyleSettings, parent=None, title: str = "ROI Properties Update"):
        super().__init__(settings, title=title)
        self.parent = parent
        self.dialog = None
        self.entries: Dict[str, ctk.CTkEntry] = {}
        self.variables: Dict[str, tk.Variable] = {}

    def show_dialog(self) -> None:
        """Show the dialog and wait until it is closed"""
        self.dialog = ctk.CTkToplevel(self.parent)
        self.dialog.title(self.title)
        self.dialog.geometry(f"{self.WIDTH}x{self.HEIGHT}")
        if self.parent is not None:
            self.dialog.transient(self.parent)

        self.dialog.update_idletasks()
        x = (self.dialog.winfo_screenwidth() // 2) - (self.WIDTH // 2)
        y = (self.dialog.winfo_screenheight() // 2) - (self.HEIGHT // 2)
        self.dialog.geometry(f"{self.WIDTH}x{self.HEIGHT}+{x}+{y}")

        self.dialog.protocol("WM_DELETE_WINDOW", self._cancel_clicked)

        self._create_widgets()
        self.notify_shown()
        self.dialog.wait_window()

    def _create_widgets(self):
        frame = ctk.CTkFrame(self.dialog)
        frame.pack(fill='both', expand=True, padx=20, pady=20)
        frame.grid_columnconfigure(1, weight=1)

        title = ctk.CTkLabel(
            frame,
            text="Line and Label Style",
            font=ctk.CTkFont(size=16, weight="bold")
        )
        title.grid(row=0, column=0, columnspan=2, pady=(10, 15))

        for row, spec in enumerate(FIELDS, start=1):
            value = self.values[spec.label]

            if spec.kind == 'checkbox':
                var = tk.BooleanVar(value=bool(value))
                self.variables[spec.label] = var
                checkbox = ctk.CTkCheckBox(
                    frame,
                    text=spec.label,
                    variable=var,
                    command=lambda label=spec.label, v=var: self.set_field(label, v.get())
                )
                checkbox.grid(row=row, column=0, columnspan=2, sticky="w", padx=10, pady=8)
                continue

            label = ctk.CTkLabel(frame, text=spec.label, font=ctk.CTkFont(size=12))
            label.grid(row=row, column=0, sticky="w", padx=10, pady=6)

            if spec.kind == 'choice':
                var = tk.StringVar(value=str(value))
                self.variables[spec.label] = var
                menu = ctk.CTkOptionMenu(
                    frame,
                    values=list(spec.choices),
                    variable=var,
                    command=lambda choice, label=spec.label: self.set_field(label, choice),
                    width=140
                )
                menu.grid(row=row, column=1, sticky="ew", padx=10, pady=6)
            else:
                entry = ctk.CTkEntry(frame, width=140)
                entry.insert(0, str(value))
                entry.grid(row=row, column=1, sticky="ew", padx=10, pady=6)
                entry.bind("<Return>", lambda event, label=spec.label: self._on_entry_changed(label))
                entry.bind("<FocusOut>", lambda event, label=spec.label: self._on_entry_changed(label))
                self.entries[spec.label] = entry

        buttons = ctk.CTkFrame(frame, fg_color="transparent")
        buttons.grid(row=len(FIELDS) + 1, column=0, columnspan=2, pady=(20, 10))

        self.ok_button = ctk.CTkButton(
            buttons,
            text="OK",
            command=self._ok_clicked,
            width=120,
            fg_color="#2E7D32",  # Dark green
            hover_color="#1B5E20"
        )
        self.ok_button.pack(side='left', padx=8)

        ctk.CTkButton(
            buttons,
            text="Cancel",
            command=self._cancel_clicked,
            width=120,
            fg_color="#757575",  # Gray
            hover_color="#616161"
        ).pack(side='left', padx=8)

    def _on_entry_changed(self, label: str):
        value = self.entries[label].get()
        if value == self.values[label]:
            return
        accepted = self.set_field(label, value)
        self.ok_button.configure(state="normal" if accepted else "disabled")

    def _flush_entries(self):
        # An edit still in the focused entry counts as a change before OK
        for label in self.entries:
            self._on_entry_changed(label)

    def _ok_clicked(self):
        self._flush_entries()
        self.ok()
        self.dialog.destroy()

    def _cancel_clicked(self):
        self.cancel()
        self.dialog.destroy()
