import sys
import tkinter as tk

from core.config.config_service import config_service
from core.logging.log_setup import configure_logging
from signplace.gui.editor_view import EditorView


class MainWindow(tk.Tk):
    def __init__(self, pdf_path=None):
        super().__init__()

        self.title("SignPlace – sign PDF documents")
        self.geometry("1000x1100")

        self.view = EditorView(self, config=config_service)
        self.view.pack(fill="both", expand=True)

        if pdf_path:
            # after the first layout pass, so the preview box has a size
            self.after(100, lambda: self.view.open_document(pdf_path))


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    configure_logging(config_service)
    app = MainWindow(argv[0] if argv else None)
    app.mainloop()


if __name__ == "__main__":
    main()
