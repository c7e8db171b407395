"""
AVL visualizer window.

    ┌─────────┐  insert/delete/search  ┌──────────┐  frames  ┌────────┐
    │  Input  │ ─────────────────────► │ Playback │ ───────► │ Canvas │
    └─────────┘                        └────┬─────┘          └────────┘
                                            │ AVLTree (live)
                                            └── exporters (PNG/GIF/PDF/MP4)

The window never touches the live tree structure directly; it only
draws snapshots carried by the frames.
"""
import logging
import random
from tkinter import (
    Toplevel, Frame, Canvas, Label, Entry, Button, Listbox, Scale,
    StringVar, LEFT, RIGHT, BOTH, X, Y, END, HORIZONTAL, W, E,
    messagebox, filedialog,
)

from avl_tree import AVLTree
from export import (ExportError, GIFExporter, PDFExporter, PNGExporter,
                    VideoExporter)
from playback import Playback, parse_values
from snapshot import count_nodes, layout_tree, tree_height, validate_avl

logger = logging.getLogger(__name__)


class VisualizerWindow(Toplevel):
    """Step-by-step AVL tree visualizer.

    Attributes:
        settings (Settings):  Persisted app settings (theme, speed, colors).
        tree (AVLTree):       The engine that records steps.
        playback (Playback):  Frames of the last operation + cursor.
        playing (bool):       True while auto-play loop is active.
        after_id (str|None):  Tkinter ``after()`` id for auto-play.
    """

    def __init__(self, master, settings):
        super().__init__(master)
        self.settings = settings
        self.title("AVL Tree — Step-by-Step")
        self.geometry("1280x860")
        self.minsize(1000, 700)
        self.configure(bg=settings.get("BG"))

        self.tree     = AVLTree()
        self.playback = Playback()
        self.playing  = False
        self.after_id = None
        self.node_radius = 22

        self.png_exporter   = PNGExporter(settings)
        self.gif_exporter   = GIFExporter(settings)
        self.pdf_exporter   = PDFExporter(settings)
        self.video_exporter = VideoExporter(settings)

        self._build_ui()
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self._draw_current()

    def _on_close(self):
        """Stop auto-play before destroying so no ``after`` fires late."""
        self.playing = False
        if self.after_id:
            self.after_cancel(self.after_id)
        self.settings.anim_speed = self.speed_scale.get()
        self.settings.save()
        self.destroy()
        self.master.destroy()

    # ═══════════════════════════════════════════════════════════════
    #  BUILD UI
    #    1. inp   — value entry + operation buttons
    #    2. body  — canvas (center) | history + stats (right)
    #    3. ctrl  — playback controls + speed slider + exports
    #    4. tlf   — timeline scrubber
    # ═══════════════════════════════════════════════════════════════
    def _build_ui(self):
        s = self.settings
        bs = {"font": ("Consolas", 10, "bold"), "bd": 0, "cursor": "hand2",
              "padx": 8}

        inp = Frame(self, bg=s.get("BG"))
        inp.pack(fill=X, padx=8, pady=6)
        Label(inp, text="Value(s):", font=("Consolas", 10),
              bg=s.get("BG"), fg=s.get("FG")).pack(side=LEFT)
        self.value_var = StringVar(value="30, 20, 10, 25, 40, 22")
        entry = Entry(inp, textvariable=self.value_var, font=("Consolas", 11),
                      width=30, bg=s.get("BG2"), fg=s.get("FG"),
                      insertbackground=s.get("FG"))
        entry.pack(side=LEFT, padx=4)
        entry.bind("<Return>", lambda e: self._on_operation("insert"))

        for txt, op, clr in [("Insert", "insert", "GREEN_C"),
                             ("Delete", "delete", "RED_C"),
                             ("Search", "search", "YELLOW_C")]:
            Button(inp, text=txt, bg=s.get(clr), fg="#11111b",
                   command=lambda op=op: self._on_operation(op),
                   **bs).pack(side=LEFT, padx=3)
        Button(inp, text="Random", bg=s.get("BTN_BG"), fg=s.get("FG"),
               command=self._random_insert, **bs).pack(side=LEFT, padx=3)
        Button(inp, text="Clear", bg=s.get("BTN_BG"), fg=s.get("FG"),
               command=self._clear_all, **bs).pack(side=LEFT, padx=3)
        Button(inp, text="Theme", bg=s.get("BTN_BG"), fg=s.get("FG"),
               command=self._toggle_theme, **bs).pack(side=RIGHT, padx=3)

        body = Frame(self, bg=s.get("BG"))
        body.pack(fill=BOTH, expand=True, padx=8, pady=4)

        right = Frame(body, bg=s.get("BG2"), width=240)
        right.pack(side=RIGHT, fill=Y, padx=(4, 0))
        right.pack_propagate(False)
        Label(right, text="History", font=("Consolas", 10, "bold"),
              bg=s.get("BG2"), fg=s.get("ACCENT")).pack(anchor=W, padx=6, pady=4)
        self.log_list = Listbox(right, font=("Consolas", 9), bd=0,
                                bg=s.get("BG"), fg=s.get("FG"))
        self.log_list.pack(fill=BOTH, expand=True, padx=4)

        stats_f = Frame(right, bg=s.get("STATS_BG"), bd=1, relief="groove")
        stats_f.pack(fill=X, padx=4, pady=4)
        self.stats_labels = {}
        for key, txt in [("nodes", "Nodes:"), ("height", "Height:"),
                         ("root", "Root:"), ("valid", "Valid AVL:")]:
            row = Frame(stats_f, bg=s.get("STATS_BG"))
            row.pack(fill=X, padx=6, pady=1)
            Label(row, text=txt, font=("Consolas", 9), width=10, anchor=W,
                  bg=s.get("STATS_BG"), fg=s.get("STATS_FG")).pack(side=LEFT)
            v = Label(row, text="—", font=("Consolas", 9, "bold"), anchor=E,
                      bg=s.get("STATS_BG"), fg=s.get("FG"))
            v.pack(side=RIGHT)
            self.stats_labels[key] = v

        center = Frame(body, bg=s.get("BG"))
        center.pack(side=LEFT, fill=BOTH, expand=True)
        self.canvas = Canvas(center, bg=s.get("CANVAS_BG"), highlightthickness=0)
        self.canvas.pack(fill=BOTH, expand=True)
        self.canvas.bind("<Configure>", lambda e: self._draw_current())
        self.step_desc = Label(center, text="", font=("Consolas", 11),
                               bg=s.get("CASE_BG"), fg=s.get("FG"), anchor=W)
        self.step_desc.pack(fill=X, pady=(4, 0))

        ctrl = Frame(self, bg=s.get("BG2"))
        ctrl.pack(fill=X, padx=8, pady=6)
        self.step_label = Label(ctrl, text="Step 0 / 0",
                                font=("Consolas", 12, "bold"),
                                bg=s.get("BG2"), fg=s.get("FG"))
        self.step_label.pack(side=LEFT, padx=(10, 12))
        for txt, cmd in [("⏮ Reset", self._reset), ("◀ Prev", self._prev)]:
            Button(ctrl, text=txt, command=cmd, bg=s.get("BTN_BG"),
                   fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)
        self.play_btn = Button(ctrl, text="▶ Play", command=self._toggle_play,
                               bg=s.get("GREEN_C"), fg="#11111b", **bs)
        self.play_btn.pack(side=LEFT, padx=2)
        for txt, cmd in [("Next ▶", self._next), ("⏭ End", self._go_end)]:
            Button(ctrl, text=txt, command=cmd, bg=s.get("BTN_BG"),
                   fg=s.get("FG"), **bs).pack(side=LEFT, padx=2)

        Label(ctrl, text="Speed:", font=("Consolas", 10),
              bg=s.get("BG2"), fg=s.get("FG")).pack(side=LEFT, padx=(20, 4))
        self.speed_scale = Scale(ctrl, from_=100, to=2500, orient=HORIZONTAL,
                                 bg=s.get("BG2"), fg=s.get("FG"),
                                 highlightthickness=0, troughcolor=s.get("BG"),
                                 length=150, font=("Consolas", 8))
        self.speed_scale.set(self.settings.anim_speed)
        self.speed_scale.pack(side=LEFT)

        for txt, cmd in [("MP4", self._export_video), ("PDF", self._export_pdf),
                         ("GIF", self._export_gif), ("PNG", self._export_png)]:
            Button(ctrl, text=txt, command=cmd, bg=s.get("ACCENT"),
                   fg="#11111b", **bs).pack(side=RIGHT, padx=2)

        tlf = Frame(self, bg=s.get("TIMELINE_BG"))
        tlf.pack(fill=X, padx=8, pady=(0, 6))
        self.timeline_scale = Scale(tlf, from_=0, to=0, orient=HORIZONTAL,
                                    bg=s.get("TIMELINE_BG"), fg=s.get("FG"),
                                    highlightthickness=0, troughcolor=s.get("BG"),
                                    font=("Consolas", 8),
                                    command=self._on_timeline_change)
        self.timeline_scale.pack(side=LEFT, fill=X, expand=True, padx=4)

    # ═══════════════════════════════════════════════════════════════
    #  OPERATIONS
    # ═══════════════════════════════════════════════════════════════

    def _on_operation(self, operation):
        """Run ``operation`` for each parsed value; show the last one's frames."""
        vals = parse_values(self.value_var.get())
        if not vals:
            messagebox.showwarning("Warning", "No valid numbers found.")
            return
        self._stop()
        for v in vals:
            self.playback.run(self.tree, operation, v)
        self._refresh_log()
        self.timeline_scale.config(to=max(0, len(self.playback) - 1))
        self.value_var.set("")
        self._draw_current()

    def _refresh_log(self):
        """Rebuild the history listbox from ``playback.history``."""
        self.log_list.delete(0, END)
        for operation, v, n_steps in self.playback.history:
            self.log_list.insert(END, f"  {operation.upper()} {v}  ({n_steps} steps)")
        self.log_list.see(END)

    def _random_insert(self):
        present = set(self.tree.inorder_traversal())
        pool = [v for v in range(1, 100) if v not in present]
        if not pool:
            return
        self.value_var.set(", ".join(str(v) for v in random.sample(pool, min(7, len(pool)))))
        self._on_operation("insert")

    def _clear_all(self):
        self._stop()
        self.tree = AVLTree()
        self.playback.clear()
        self._refresh_log()
        self.timeline_scale.config(to=0)
        self._draw_current()

    def _toggle_theme(self):
        self.settings.toggle_theme()
        self.settings.save()
        messagebox.showinfo("Theme", "Theme saved; it applies on next start.")

    # ═══════════════════════════════════════════════════════════════
    #  DRAWING
    # ═══════════════════════════════════════════════════════════════

    def _draw_current(self):
        """Update labels, stats and canvas for the current frame."""
        step = self.playback.current
        if step is None:
            self.step_label.config(text="Step 0 / 0")
            self.step_desc.config(text="Enter values and press Insert")
            self._update_stats(self.tree.snapshot())
            self._render_tree(self.tree.snapshot())
            return

        idx = self.playback.index
        self.step_label.config(text=f"Step {idx + 1} / {len(self.playback)}")
        desc = step.label + (f"   [{step.case}]" if step.case else "")
        self.step_desc.config(text=desc)
        self.timeline_scale.set(idx)
        self._update_stats(step.after)
        self._render_tree(step.after)

    def _render_tree(self, tree_state):
        """Render a snapshot on the canvas: edges, circles, value + height."""
        c = self.canvas
        c.delete("all")
        cw = max(c.winfo_width(), 600)
        ch = max(c.winfo_height(), 400)
        s  = self.settings

        if tree_state is None:
            c.create_text(cw // 2, ch // 2, text="Empty Tree",
                          font=("Consolas", 16), fill=s.get("FG"))
            return

        positions = {}
        layout_tree(tree_state, 0, 0.0, 1.0, positions)
        th  = max(tree_height(tree_state), 1)
        pad = 60
        nr  = self.node_radius

        def cx(x): return int(pad + x * (cw - 2 * pad))
        def cy(y): return int(50 + y * (ch - 100) / th)

        def _draw(node, parent_pos=None):
            if node is None:
                return
            pos = positions[node["id"]]
            x, y = cx(pos["x"]), cy(pos["y"])
            if parent_pos:
                c.create_line(parent_pos[0], parent_pos[1], x, y,
                              fill=s.get("EDGE"), width=2)
            _draw(node.get("left"),  (x, y))
            _draw(node.get("right"), (x, y))

            hl = s.marker_color(node["markers"])
            if hl:
                c.create_oval(x - nr - 5, y - nr - 5, x + nr + 5, y + nr + 5,
                              outline=hl, width=2, dash=(4, 2))
            c.create_oval(x - nr, y - nr, x + nr, y + nr,
                          fill=s.get("NODE_FILL"), outline=hl or "#666666",
                          width=4 if hl else 1)
            c.create_text(x, y, text=str(node["value"]),
                          fill=s.get("NODE_TEXT"), font=("Consolas", 12, "bold"))
            c.create_text(x + nr + 10, y - nr, text=f"h{node['height']}",
                          fill=s.get("HEIGHT_FG"), font=("Consolas", 8))
            if node["markers"]:
                c.create_text(x, y + nr + 10, text=",".join(node["markers"]),
                              fill=hl or s.get("FG"), font=("Consolas", 8))

        _draw(tree_state)

    def _update_stats(self, root):
        if root is None:
            for k in self.stats_labels:
                self.stats_labels[k].config(text="—")
            return
        ok, _ = validate_avl(root)
        self.stats_labels["nodes"].config(text=str(count_nodes(root)))
        self.stats_labels["height"].config(text=str(tree_height(root)))
        self.stats_labels["root"].config(text=str(root["value"]))
        self.stats_labels["valid"].config(text="Yes" if ok else "No")

    # ═══════════════════════════════════════════════════════════════
    #  PLAYBACK CONTROLS
    # ═══════════════════════════════════════════════════════════════

    def _next(self):
        if self.playback.next():
            self._draw_current()

    def _prev(self):
        if self.playback.prev():
            self._draw_current()

    def _reset(self):
        self._stop()
        self.playback.reset()
        self._draw_current()

    def _go_end(self):
        self._stop()
        self.playback.go_end()
        self._draw_current()

    def _stop(self):
        self.playing = False
        self.play_btn.config(text="▶ Play", bg=self.settings.get("GREEN_C"))
        if self.after_id:
            self.after_cancel(self.after_id)
            self.after_id = None

    def _toggle_play(self):
        if self.playing:
            self._stop()
            return
        if not len(self.playback):
            messagebox.showinfo("Info", "Run an operation first!")
            return
        if self.playback.at_end:
            self.playback.reset()
        self.playing = True
        self.play_btn.config(text="⏸ Pause", bg=self.settings.get("RED_C"))
        self._draw_current()
        self.after_id = self.after(self.speed_scale.get(), self._auto_step)

    def _auto_step(self):
        """Advance one frame, then reschedule until the last frame."""
        if not self.playing:
            return
        if self.playback.next():
            self._draw_current()
            self.after_id = self.after(self.speed_scale.get(), self._auto_step)
        else:
            self._stop()

    def _on_timeline_change(self, val):
        # guard against the feedback loop from timeline_scale.set()
        if len(self.playback) and int(val) != self.playback.index:
            self.playback.seek(val)
            self._draw_current()

    # ═══════════════════════════════════════════════════════════════
    #  EXPORT
    # ═══════════════════════════════════════════════════════════════

    def _export(self, title, ext, func):
        if not len(self.playback):
            messagebox.showinfo("Info", "Run an operation first!")
            return
        filename = filedialog.asksaveasfilename(
            title=title, defaultextension=ext, filetypes=[(title, f"*{ext}")])
        if not filename:
            return
        try:
            func(filename)
        except ExportError as e:
            logger.error("%s failed: %s", title, e)
            messagebox.showerror("Export Error", str(e))
            return
        messagebox.showinfo("Export", f"Saved {filename}")

    def _export_png(self):
        self._export("PNG image", ".png",
                     lambda fn: self.png_exporter.export(self.playback.current, fn))

    def _export_gif(self):
        self._export("GIF animation", ".gif",
                     lambda fn: self.gif_exporter.export(self.playback.frames, fn,
                                                         self.speed_scale.get()))

    def _export_pdf(self):
        self._export("PDF walkthrough", ".pdf",
                     lambda fn: self.pdf_exporter.export(self.playback.frames, fn))

    def _export_video(self):
        self._export("MP4 video", ".mp4",
                     lambda fn: self.video_exporter.export(self.playback.frames, fn))
