"""
Main window for MeasureLabel
"""
import customtkinter as ctk
import logging
import numpy as np
from pathlib import Path
from typing import Dict, Any, Optional
import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure
from tkinter import messagebox

from measurelabel.utils.config import load_config, ensure_directories
from measurelabel.utils.file_io import ImageLoader, export_rois_json
from measurelabel.core.image_document import ImageDocument, set_current_image
from measurelabel.core.measure_and_label import measure_and_label
from measurelabel.core.overlay import RoiManager
from measurelabel.core.roi_handler import HandlerState
from measurelabel.core.rois import LineRoi, ROIType
from measurelabel.gui.dialogs.calibration_dialog import CalibrationDialog
from measurelabel.gui.dialogs.file_dialogs import FileDialogs
from measurelabel.gui.dialogs.style_dialog import StyleDialog
from measurelabel.gui.overlay_renderer import OverlayRenderer
from measurelabel.gui.roi_selector import SelectionTool


class MeasureLabelApp:
    """Main application window for MeasureLabel"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(__name__)
        self.config = config or load_config()

        self.file_dialogs = FileDialogs()
        self.image_loader = ImageLoader()

        # Current loaded data
        self.current_image: Optional[ImageDocument] = None
        self.selection_tool: Optional[SelectionTool] = None
        self.renderer: Optional[OverlayRenderer] = None
        self.measuring = False

        # Cleanup tracking
        self.scheduled_callbacks = []
        self.is_closing = False
        self.pan_start = None

        ensure_directories(self.config)

        ctk.set_appearance_mode(self.config['theme'])
        ctk.set_default_color_theme(self.config['ctk_theme'])

        self.root = ctk.CTk()
        self.setup_window()
        self.create_widgets()

        self.logger.info("MeasureLabel application initialized")

    def setup_window(self):
        """Configure the main window properties"""
        self.root.title("MeasureLabel")

        width, height = map(int, self.config['window_size'].split('x'))
        self.root.geometry(f"{width}x{height}")

        # Center window on screen
        self.root.update_idletasks()
        x = (self.root.winfo_screenwidth() // 2) - (width // 2)
        y = (self.root.winfo_screenheight() // 2) - (height // 2)
        self.root.geometry(f"{width}x{height}+{x}+{y}")

        self.root.grid_columnconfigure(1, weight=1)
        self.root.grid_rowconfigure(0, weight=1)
        self.root.minsize(800, 600)

        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

        self.logger.debug(f"Window configured: {width}x{height}")

    def create_widgets(self):
        """Create and arrange the main interface widgets"""
        self.sidebar_frame = ctk.CTkFrame(self.root, width=230, corner_radius=0)
        self.sidebar_frame.grid(row=0, column=0, sticky="nsew")

        self.logo_label = ctk.CTkLabel(
            self.sidebar_frame,
            text="MeasureLabel",
            font=ctk.CTkFont(size=20, weight="bold")
        )
        self.logo_label.pack(pady=(20, 10), padx=20)

        self._section_label("Image")
        self._sidebar_button("Load Image", self.load_image_action)
        self._sidebar_button("Set Scale", self.set_scale_action)

        self._section_label("Selection")
        self.selection_buttons = {}
        for roi_type, text in ((ROIType.LINE, "Line"),
                               (ROIType.RECTANGLE, "Rectangle"),
                               (ROIType.POINT, "Point")):
            self.selection_buttons[roi_type] = self._sidebar_button(
                text, lambda t=roi_type: self.set_selection_type(t)
            )

        self._section_label("Annotate")
        self.measure_btn = self._sidebar_button(
            "Measure and Label", self.measure_label_action,
            fg_color="#2E7D32", hover_color="#1B5E20"
        )
        self._sidebar_button("Clear Overlay", self.clear_overlay_action)
        self._sidebar_button("ROI Manager", self.show_roi_manager)

        self._section_label("Export")
        self._sidebar_button("Export Image", self.export_image_action)
        self._sidebar_button("Export ROIs", self.export_rois_action)

        self._sidebar_button("Toggle Theme", self.toggle_theme, pady=(30, 5))

        # Main content area
        self.main_frame = ctk.CTkFrame(self.root)
        self.main_frame.grid(row=0, column=1, sticky="nsew", padx=20, pady=20)
        self.main_frame.grid_columnconfigure(0, weight=1)
        self.main_frame.grid_rowconfigure(0, weight=1)

        self.figure = Figure(figsize=(8, 6), dpi=100)
        self.subplot = self.figure.add_subplot(111)
        self.subplot.set_title("No image loaded")
        self.subplot.axis('off')

        self.canvas = FigureCanvasTkAgg(self.figure, self.main_frame)
        self.canvas.get_tk_widget().grid(row=0, column=0, sticky="nsew", padx=10, pady=10)

        self.setup_manual_navigation()

        self.status_label = ctk.CTkLabel(
            self.root,
            text="Ready",
            font=ctk.CTkFont(size=12)
        )
        self.status_label.grid(row=1, column=0, columnspan=2, sticky="ew", padx=20, pady=(0, 10))

        self.logger.debug("Main interface widgets created")

    def _section_label(self, text: str):
        ctk.CTkLabel(
            self.sidebar_frame,
            text=text,
            font=ctk.CTkFont(size=14, weight="bold")
        ).pack(pady=(20, 10), padx=20)

    def _sidebar_button(self, text, command, pady=2, **kwargs):
        button = ctk.CTkButton(self.sidebar_frame, text=text, command=command, width=190, **kwargs)
        button.pack(pady=pady, padx=20)
        return button

    def update_status(self, message: str):
        """Update status with a message that clears after a while"""
        if self.is_closing:
            return

        self.status_label.configure(text=message)
        self.root.update_idletasks()

        def clear_status():
            if not self.is_closing:
                self.status_label.configure(text="Ready")

        callback_id = self.root.after(8000, clear_status)
        self.scheduled_callbacks.append(callback_id)

    def on_closing(self):
        """Handle application closing with proper cleanup"""
        self.logger.info("Application closing...")
        self.is_closing = True

        for callback_id in self.scheduled_callbacks:
            self.root.after_cancel(callback_id)

        if self.selection_tool:
            self.selection_tool.deactivate_selection()

        plt.close('all')

        self.root.quit()
        self.root.destroy()

    def run(self):
        """Start the application main loop"""
        self.logger.info("Starting MeasureLabel main loop")
        try:
            self.root.mainloop()
        finally:
            self.logger.info("MeasureLabel application closed")

    def setup_manual_navigation(self):
        """Mouse wheel zoom, right-drag pan, double-click to fit"""

        def on_scroll(event):
            if event.inaxes != self.subplot or self.current_image is None:
                return
            if event.xdata is None or event.ydata is None:
                return

            xlim = self.subplot.get_xlim()
            ylim = self.subplot.get_ylim()
            zoom_factor = 1.2 if event.button == 'up' else 1/1.2

            x_range = (xlim[1] - xlim[0]) / zoom_factor
            y_range = (ylim[1] - ylim[0]) / zoom_factor
            self.subplot.set_xlim([event.xdata - x_range/2, event.xdata + x_range/2])
            self.subplot.set_ylim([event.ydata - y_range/2, event.ydata + y_range/2])
            self.refresh_overlay()

        def on_button_press(event):
            if event.button == 3:
                self.pan_start = (event.xdata, event.ydata)
                self.canvas.get_tk_widget().configure(cursor="fleur")
            elif event.dblclick and event.inaxes == self.subplot:
                self.fit_view()

        def on_button_release(event):
            if event.button == 3:
                self.pan_start = None
                self.canvas.get_tk_widget().configure(cursor="")

        def on_motion(event):
            if self.pan_start and event.inaxes == self.subplot and self.current_image is not None:
                if event.xdata is None or self.pan_start[0] is None:
                    return
                dx = self.pan_start[0] - event.xdata
                dy = self.pan_start[1] - event.ydata

                xlim = self.subplot.get_xlim()
                ylim = self.subplot.get_ylim()
                self.subplot.set_xlim([xlim[0] + dx, xlim[1] + dx])
                self.subplot.set_ylim([ylim[0] + dy, ylim[1] + dy])
                self.canvas.draw_idle()

        self.figure.canvas.mpl_connect('scroll_event', on_scroll)
        self.figure.canvas.mpl_connect('button_press_event', on_button_press)
        self.figure.canvas.mpl_connect('button_release_event', on_button_release)
        self.figure.canvas.mpl_connect('motion_notify_event', on_motion)

    def fit_view(self):
        if self.current_image is None:
            return
        self.subplot.set_xlim(-0.5, self.current_image.width - 0.5)
        self.subplot.set_ylim(self.current_image.height - 0.5, -0.5)
        self.refresh_overlay()

    def refresh_overlay(self):
        # Line widths and fonts are in image pixels, so they follow the zoom level
        if self.renderer and self.current_image is not None:
            self.renderer.render(self.current_image)
        else:
            self.canvas.draw_idle()

    def display_image(self, image: ImageDocument):
        """Show an image document and hook its overlay up to the canvas"""
        if self.current_image is not None and self.renderer is not None:
            self.current_image.remove_repaint_listener(self.renderer.render)
        if self.selection_tool:
            self.selection_tool.deactivate_selection()

        self.figure.clear()
        self.subplot = self.figure.add_subplot(111)

        data = image.data
        is_grayscale = data.ndim == 2 or (data.ndim == 3 and data.shape[2] == 1)
        if is_grayscale:
            self.subplot.imshow(np.squeeze(data), cmap='gray', interpolation='nearest')
        else:
            self.subplot.imshow(data, interpolation='nearest')

        calibration = image.get_calibration()
        subtitle = f"{image.width}x{image.height} px"
        if calibration.scaled():
            subtitle += (f" ({calibration.get_x(image.width):.4g}x"
                         f"{calibration.get_y(image.height):.4g} {calibration.get_unit()})")
        self.subplot.set_title(f"{image.title} - {subtitle}")
        self.subplot.axis('off')
        self.figure.tight_layout()

        self.current_image = image
        set_current_image(image)

        self.renderer = OverlayRenderer(self.figure, self.subplot)
        image.add_repaint_listener(self.renderer.render)

        self.selection_tool = SelectionTool(
            self.figure, self.subplot, image, status_callback=self.update_status
        )
        self.selection_tool.activate_selection()
        self._update_selection_button_colors(self.selection_tool.current_roi_type)

        self.canvas.draw()
        self.renderer.render(image)

    def load_image_action(self):
        """Handle load image button click"""
        self.logger.info("Load image action triggered")
        if self.measuring:
            self.update_status("Finish the open Measure and Label dialog first")
            return

        image_path = self.file_dialogs.select_image_file()
        if not image_path:
            self.update_status("Image loading cancelled")
            return

        self.open_image(image_path)

    def open_image(self, image_path: Path):
        """Load an image file and show it"""
        try:
            image = self.image_loader.load_image(image_path)
            if image is None:
                messagebox.showerror("Error", f"Failed to load image: {image_path.name}")
                self.update_status("Failed to load image")
                return
            self.display_image(image)
            self.update_status(f"Loaded image: {image.title} - {image.width}x{image.height} px")
            self.logger.info(f"New image loaded and displayed: {image.title}")
        except Exception as e:
            self.logger.error(f"Error loading image: {e}")
            messagebox.showerror("Error", f"Error loading image: {e}")
            self.update_status(f"Error loading image: {e}")

    def set_scale_action(self):
        if self.measuring:
            self.update_status("Finish the open Measure and Label dialog first")
            return
        if self.current_image is None:
            self.update_status("No image loaded - please load an image first")
            return

        selection = self.current_image.get_roi()
        distance_px = selection.get_length() if isinstance(selection, LineRoi) else None
        calibration = CalibrationDialog(
            self.root, self.current_image.get_calibration(), distance_px
        ).show()
        if calibration is None:
            return

        self.current_image.set_calibration(calibration)
        self.display_image(self.current_image)
        if calibration.scaled():
            self.update_status(f"Scale: {1 / calibration.pixel_width:.4g} pixels/{calibration.get_unit()}")
        else:
            self.update_status("Scale removed")

    def set_selection_type(self, roi_type: ROIType):
        if self.selection_tool is None:
            self.update_status("No image loaded - please load an image first")
            return
        self.selection_tool.set_roi_type(roi_type)
        self.selection_tool.activate_selection()
        self._update_selection_button_colors(roi_type)

    def _update_selection_button_colors(self, active_type: ROIType):
        default_color = ctk.ThemeManager.theme["CTkButton"]["fg_color"]
        for roi_type, button in self.selection_buttons.items():
            button.configure(fg_color="#1565C0" if roi_type == active_type else default_color)

    def measure_label_action(self):
        """Measure the line selection, label it and open the style dialog"""
        if self.current_image is None:
            self.update_status("No image loaded - please load an image first")
            return
        if self.measuring:
            return

        selection = self.current_image.get_roi()
        if selection is None or not selection.is_line():
            self.update_status("Only line selection currently supported - draw a line first")
            return

        self.measuring = True
        self.measure_btn.configure(state="disabled")
        try:
            handler = measure_and_label(
                self.current_image,
                config=self.config,
                dialog_factory=lambda settings: StyleDialog(settings, parent=self.root),
            )
        except Exception as e:
            self.logger.error(f"Measure and Label failed: {e}")
            messagebox.showerror("Error", f"Measure and Label failed: {e}")
            self.update_status(f"Measure and Label failed: {e}")
            return
        finally:
            self.measuring = False
            if not self.is_closing:
                self.measure_btn.configure(state="normal")

        if handler is None or handler.state == HandlerState.IDLE:
            return

        if handler.state == HandlerState.COMMITTED:
            # The measured line now belongs to the overlay or the ROI Manager
            self.current_image.kill_roi()
            self.current_image.update_and_repaint_window()
            destination = "overlay" if handler.settings.save_to_overlay else "ROI Manager"
            self.update_status(f"Saved {handler.text_roi.text} to {destination}")
        else:
            self.update_status("Measure and Label cancelled")

    def clear_overlay_action(self):
        if self.current_image is None or self.measuring:
            return
        overlay = self.current_image.get_overlay()
        if overlay is None or overlay.size() == 0:
            self.update_status("Overlay is empty")
            return
        if not messagebox.askyesno("Clear Overlay", f"Remove all {overlay.size()} overlay items?"):
            return
        overlay.clear()
        self.current_image.update_and_repaint_window()
        self.update_status("Overlay cleared")
        self.logger.info("Overlay cleared")

    def show_roi_manager(self):
        """List the ROI Manager contents"""
        manager = RoiManager.get_or_create()

        window = ctk.CTkToplevel(self.root)
        window.title("ROI Manager")
        window.geometry("360x420")
        window.transient(self.root)

        ctk.CTkLabel(
            window,
            text=f"ROI Manager ({manager.count()} ROIs)",
            font=ctk.CTkFont(size=16, weight="bold")
        ).pack(pady=(15, 10))

        textbox = ctk.CTkTextbox(window, font=ctk.CTkFont(family="Courier", size=12))
        textbox.pack(fill='both', expand=True, padx=15, pady=(0, 10))
        for label, roi in zip(manager.labels(), manager.get_rois_as_array()):
            description = getattr(roi, 'text', '') or roi.roi_type.value
            textbox.insert("end", f"{label:<14} {description}\n")
        textbox.configure(state="disabled")

        def reset():
            manager.reset()
            window.destroy()
            self.update_status("ROI Manager reset")

        buttons = ctk.CTkFrame(window, fg_color="transparent")
        buttons.pack(pady=(0, 15))
        ctk.CTkButton(buttons, text="Reset", command=reset, width=100,
                      fg_color="#757575", hover_color="#616161").pack(side='left', padx=5)
        ctk.CTkButton(buttons, text="Close", command=window.destroy, width=100).pack(side='left', padx=5)

    def export_image_action(self):
        """Export the image with its overlay burned in"""
        if self.current_image is None:
            messagebox.showwarning("No Image", "Please load an image first")
            return

        path = self.file_dialogs.select_save_file(
            "Export Image with Overlay", "png", "PNG image", self.config['export_dir']
        )
        if not path:
            return

        try:
            self.figure.savefig(
                path,
                dpi=self.config['export_dpi'],
                bbox_inches='tight',
                pad_inches=0
            )
            self.update_status(f"Exported image to {path}")
            self.logger.info(f"Exported image to {path} ({self.config['export_dpi']} DPI)")
        except Exception as e:
            self.logger.error(f"Export error: {e}")
            messagebox.showerror("Export Error", f"Error exporting image: {e}")
            self.update_status("Export failed")

    def export_rois_action(self):
        """Export overlay and ROI Manager contents as JSON"""
        rois = []
        if self.current_image is not None and self.current_image.get_overlay() is not None:
            rois.extend(roi.to_dict() for roi in self.current_image.get_overlay())
        manager = RoiManager.get_instance()
        if manager is not None:
            rois.extend(manager.export_rois())

        if not rois:
            self.update_status("No ROIs to export")
            return

        path = self.file_dialogs.select_save_file(
            "Export ROIs", "json", "JSON files", self.config['export_dir']
        )
        if not path:
            return

        try:
            export_rois_json(rois, path)
            self.update_status(f"Exported {len(rois)} ROIs to {path}")
        except Exception as e:
            self.logger.error(f"ROI export error: {e}")
            messagebox.showerror("Export Error", f"Error exporting ROIs: {e}")
            self.update_status("Export failed")

    def toggle_theme(self):
        """Toggle between light and dark themes"""
        current_mode = ctk.get_appearance_mode()
        new_mode = "Light" if current_mode == "Dark" else "Dark"
        ctk.set_appearance_mode(new_mode)
        self.update_status(f"Theme changed to {new_mode}")
        self.logger.info(f"Theme toggled to {new_mode}")
