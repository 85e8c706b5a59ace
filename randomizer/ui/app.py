#!/usr/bin/env python3
"""
Main GUI Application - String Randomizer.
tkinter-based interface with:
- String shuffling with copy-to-clipboard
- XML pretty-printing with copy-to-clipboard
- Syntax highlighting of formatted XML (pygments, if available)
- Open/save of XML files, drag & drop (tkinterdnd2, if available)
- Light/Dark theme toggle
- Text fields persisted across restarts
"""

import os
import sys
import logging
import tkinter as tk
from tkinter import ttk, filedialog, messagebox, scrolledtext

from ..config import APP_TITLE, SOURCE_URL, THEMES, LIGHT_THEME, AppState
from ..formatter import pretty_print
from ..models import ParseError
from ..utils import read_xml_file, shuffle
from ..utils.file_utils import is_xml_path

logger = logging.getLogger(__name__)

# Optional modern UI
try:
    import customtkinter as ctk
    HAS_MODERN_UI = True
except ImportError:
    HAS_MODERN_UI = False

# Optional syntax highlighting
try:
    from pygments import lex
    from pygments.lexers import XmlLexer
    from pygments.token import Token
    HAS_SYNTAX_HIGHLIGHT = True
except ImportError:
    HAS_SYNTAX_HIGHLIGHT = False

if HAS_SYNTAX_HIGHLIGHT:
    # Most specific first; each token is tagged with the first match
    HIGHLIGHT_TOKENS = [
        (Token.Comment.Preproc, "xml_tag"),
        (Token.Comment, "xml_comment"),
        (Token.Name.Tag, "xml_tag"),
        (Token.Name.Attribute, "xml_attr"),
        (Token.Literal.String, "xml_string"),
    ]


class RandomizerApp:
    """Main application window for String Randomizer."""

    def __init__(self, root: tk.Tk):
        self.root = root
        self.root.title(APP_TITLE)
        self.root.minsize(640, 560)

        # State
        self.state = AppState.load()
        self.colors = LIGHT_THEME

        self._setup_styles()
        self._setup_menu()
        self._setup_main_layout()
        self._setup_statusbar()
        self._setup_drag_drop()
        self._restore_state()
        self._apply_theme(self.state.theme)
        self._highlight_output()

        # Restore window geometry
        if self.state.window_geometry:
            try:
                self.root.geometry(self.state.window_geometry)
            except tk.TclError:
                pass

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        logger.info("Application initialized")

    # ─── Setup ─────────────────────────────────────────────

    def _setup_styles(self):
        self.style = ttk.Style()
        self.style.theme_use('clam')
        self.style.configure("Action.TButton", padding=(10, 4))
        self.style.configure("Status.TLabel", padding=(4, 2))

    def _setup_menu(self):
        menu = tk.Menu(self.root)
        self.root.config(menu=menu)

        # File menu
        file_m = tk.Menu(menu, tearoff=0)
        menu.add_cascade(label="File", menu=file_m)
        file_m.add_command(label="Open XML...", command=self.open_xml, accelerator="Ctrl+O")
        file_m.add_command(label="Save Output XML...", command=self.save_output_xml,
                           accelerator="Ctrl+S")
        file_m.add_separator()
        file_m.add_command(label="Quit", command=self._on_close)

        # Theme menu
        theme_m = tk.Menu(menu, tearoff=0)
        menu.add_cascade(label="Theme", menu=theme_m)
        for name in THEMES:
            theme_m.add_command(label=f"{name} Mode", command=lambda n=name: self._apply_theme(n))

        # Help menu
        help_m = tk.Menu(menu, tearoff=0)
        menu.add_cascade(label="Help", menu=help_m)
        help_m.add_command(label="About", command=self._show_about)

        # Key bindings
        self.root.bind("<Control-o>", lambda e: self.open_xml())
        self.root.bind("<Control-s>", lambda e: self.save_output_xml())
        self.root.bind("<F5>", lambda e: self.randomize())
        self.root.bind("<Control-Return>", lambda e: self.format_xml())

    def _setup_main_layout(self):
        main = ttk.Frame(self.root)
        main.pack(fill=tk.BOTH, expand=True, padx=10, pady=8)

        # ── String shuffle ──
        ttk.Label(main, text="Input String:").pack(anchor="center")
        self.input_var = tk.StringVar()
        ttk.Entry(main, textvariable=self.input_var, width=60).pack(fill=tk.X, pady=(0, 4))

        ttk.Label(main, text="Output String:").pack(anchor="center")
        self.output_var = tk.StringVar()
        ttk.Entry(main, textvariable=self.output_var, width=60).pack(fill=tk.X, pady=(0, 4))

        row = ttk.Frame(main)
        row.pack(pady=4)
        ttk.Button(row, text="Randomize!", command=self.randomize,
                   style="Action.TButton").pack(side=tk.LEFT, padx=4)
        ttk.Button(row, text="Copy Output", command=lambda: self.copy_to_clipboard(self.output_var.get()),
                   style="Action.TButton").pack(side=tk.LEFT, padx=4)

        ttk.Separator(main, orient=tk.HORIZONTAL).pack(fill=tk.X, pady=8)

        # ── XML formatting ──
        ttk.Label(main, text="Input XML:").pack(anchor="center")
        self.input_xml = scrolledtext.ScrolledText(main, height=6, wrap="word", font=('Consolas', 9),
                                                   undo=True)
        self.input_xml.pack(fill=tk.BOTH, expand=True, pady=(0, 4))

        ttk.Label(main, text="Output XML:").pack(anchor="center")
        self.output_xml = scrolledtext.ScrolledText(main, height=10, wrap="none", font=('Consolas', 9))
        self.output_xml.pack(fill=tk.BOTH, expand=True, pady=(0, 4))

        row = ttk.Frame(main)
        row.pack(pady=4)
        ttk.Button(row, text="Format!", command=self.format_xml,
                   style="Action.TButton").pack(side=tk.LEFT, padx=4)
        ttk.Button(row, text="Copy Output", command=lambda: self.copy_to_clipboard(self._output_xml_text()),
                   style="Action.TButton").pack(side=tk.LEFT, padx=4)

        self.theme_btn = ttk.Button(main, text="Theme", command=self._toggle_theme)
        self.theme_btn.pack(side=tk.RIGHT)

    def _setup_statusbar(self):
        status_frame = ttk.Frame(self.root)
        status_frame.pack(fill=tk.X, side=tk.BOTTOM)

        self.status_var = tk.StringVar(value="Ready.")
        ttk.Label(
            status_frame, textvariable=self.status_var,
            relief=tk.SUNKEN, anchor="w", style="Status.TLabel",
        ).pack(fill=tk.X, padx=2, pady=1)

    def _setup_drag_drop(self):
        """Setup drag and drop support (requires tkinterdnd2 if available)."""
        try:
            from tkinterdnd2 import DND_FILES
            self.root.drop_target_register(DND_FILES)
            self.root.dnd_bind('<<Drop>>', self._on_drop)
            logger.info("Drag & drop enabled")
        except (ImportError, AttributeError, tk.TclError):
            logger.debug("tkinterdnd2 not available, drag & drop disabled")

    def _on_drop(self, event):
        """Load the first dropped XML file into the input area."""
        for p in self.root.tk.splitlist(event.data):
            if os.path.isfile(p) and is_xml_path(p):
                self._load_xml_file(p)
                return
        self._set_status("Drop an .xml file to load it")

    # ─── State ─────────────────────────────────────────────

    def _restore_state(self):
        self.input_var.set(self.state.input)
        self.output_var.set(self.state.output)
        self._set_text(self.input_xml, self.state.input_xml)
        self._set_text(self.output_xml, self.state.output_xml)

    def _collect_state(self):
        self.state.input = self.input_var.get()
        self.state.output = self.output_var.get()
        self.state.input_xml = self.input_xml.get("1.0", "end-1c")
        self.state.output_xml = self._output_xml_text()

    # ─── Theme ─────────────────────────────────────────────

    def _apply_theme(self, theme: str):
        if theme not in THEMES:
            theme = "Light"
        self.state.theme = theme
        self.colors = THEMES[theme]

        try:
            self.root.configure(bg=self.colors.bg)
            for widget in (self.input_xml, self.output_xml):
                widget.configure(bg=self.colors.editor_bg, fg=self.colors.fg,
                                 insertbackground=self.colors.fg)
        except tk.TclError:
            pass

        if HAS_MODERN_UI:
            try:
                ctk.set_appearance_mode(theme)
            except ValueError:
                pass

        self._configure_highlight_tags()
        self.theme_btn.config(text=f"Theme: {theme}")
        self._set_status(f"Theme: {theme}")

    def _toggle_theme(self):
        names = list(THEMES)
        idx = names.index(self.state.theme) if self.state.theme in names else 0
        self._apply_theme(names[(idx + 1) % len(names)])

    # ─── Actions ───────────────────────────────────────────

    def randomize(self):
        self.output_var.set(shuffle(self.input_var.get()))
        self._set_status("Randomized.")

    def format_xml(self):
        source = self.input_xml.get("1.0", "end-1c")
        try:
            formatted = pretty_print(source)
        except ParseError as e:
            # Keep the previous output; a half-formatted document helps nobody
            logger.info("Format failed: %s", e)
            self._set_status(f"XML error at byte {e.offset} ({e.location}): {e.message}")
            messagebox.showerror("XML Error", f"{e.location}\n\n{e}")
            return
        self._set_text(self.output_xml, formatted)
        self._highlight_output()
        self._set_status(f"Formatted {len(formatted.splitlines())} line(s).")

    def copy_to_clipboard(self, text: str):
        self.root.clipboard_clear()
        self.root.clipboard_append(text)
        self._set_status("Copied to clipboard.")

    def open_xml(self):
        path = filedialog.askopenfilename(
            filetypes=[("XML Files", "*.xml"), ("All Files", "*.*")],
            initialdir=self.state.last_directory or None,
        )
        if path:
            self._load_xml_file(path)

    def _load_xml_file(self, path: str):
        content, err = read_xml_file(path)
        if content is None:
            messagebox.showerror("Error", err)
            self._set_status(f"Could not load {os.path.basename(path)}")
            return
        self.state.last_directory = os.path.dirname(path)
        self._set_text(self.input_xml, content)
        self._set_status(f"Loaded {os.path.basename(path)}")

    def save_output_xml(self):
        path = filedialog.asksaveasfilename(
            defaultextension=".xml",
            filetypes=[("XML Files", "*.xml"), ("All Files", "*.*")],
            initialdir=self.state.last_directory or None,
        )
        if not path:
            return
        try:
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(self._output_xml_text())
        except OSError as e:
            messagebox.showerror("Error", f"Cannot write file:\n{e}")
            return
        self.state.last_directory = os.path.dirname(path)
        self._set_status(f"Saved {os.path.basename(path)}")

    # ─── Syntax highlighting ───────────────────────────────

    def _configure_highlight_tags(self):
        if not HAS_SYNTAX_HIGHLIGHT:
            return
        for _, color_name in HIGHLIGHT_TOKENS:
            self.output_xml.tag_configure(color_name, foreground=getattr(self.colors, color_name))

    def _highlight_output(self):
        if not HAS_SYNTAX_HIGHLIGHT:
            return
        widget = self.output_xml
        for _, tag in HIGHLIGHT_TOKENS:
            widget.tag_remove(tag, "1.0", tk.END)

        widget.mark_set("range_start", "1.0")
        for ttype, value in lex(self._output_xml_text(), XmlLexer()):
            widget.mark_set("range_end", f"range_start + {len(value)}c")
            for base, tag in HIGHLIGHT_TOKENS:
                if ttype in base:
                    widget.tag_add(tag, "range_start", "range_end")
                    break
            widget.mark_set("range_start", "range_end")

    # ─── Utility ───────────────────────────────────────────

    def _output_xml_text(self) -> str:
        return self.output_xml.get("1.0", "end-1c")

    @staticmethod
    def _set_text(widget: tk.Text, text: str):
        widget.delete("1.0", tk.END)
        widget.insert("1.0", text)

    def _set_status(self, msg: str):
        self.status_var.set(msg)

    def _show_about(self):
        messagebox.showinfo(
            "About",
            f"{APP_TITLE}\n\n"
            f"Shuffle strings and pretty-print XML.\n\n"
            f"Powered by tkinter and pygments.\n"
            f"Source code: {SOURCE_URL}\n\n"
            f"Python {sys.version.split()[0]}"
        )

    def _on_close(self):
        try:
            self._collect_state()
            self.state.window_geometry = self.root.geometry()
            self.state.save()
        except tk.TclError as e:
            logger.warning("Could not save state on close: %s", e)
        self.root.destroy()
