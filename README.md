# emberkit

A pure-Python library of small parts that a game engine needs. It uses
only the standard library.

## Modules

- `emberkit.rectpack`: a skyline rectangle packer for texture atlases.
  `RectPacker(width, height, num_nodes)` packs `Rect` objects in place.
  The tallest rectangles go first. `pack` returns `True` if all of them
  fit. A rectangle that does not fit gets `was_packed = False` and both
  coordinates set to `MAX_COORD`. You choose the placement rule with
  `set_heuristic(Heuristic.SKYLINE_BL_SORT_HEIGHT)` (bottom-left, the
  default) or `Heuristic.SKYLINE_BF_SORT_HEIGHT` (best fit). By default
  widths are rounded up so that the packer never runs out of skyline
  nodes. `set_allow_out_of_mem(True)` uses exact widths instead.
- `emberkit.textedit`: `TextEditor` keeps a cursor and a selection on a
  text buffer and handles editing input. It covers `click`, `drag`,
  `cut`, `paste` and `key`. `key` takes a one-character string or code
  point to type, or a `Key` code: arrows, page up/down, line, text and
  word movement, delete, backspace, insert mode, undo and redo. Combine a
  code with `Key.SHIFT` to extend the selection. In single-line mode, up
  and down act like left and right, and newlines are not typed.
- `emberkit.textedit_layout`: the layout queries the editor relies on.
  `TextRow` and `FindState` hold the results. `locate_coord` does hit
  testing and `find_charpos` finds caret positions. `SimpleTextBuffer` is
  a monospaced buffer whose rows break only at newlines. It takes an
  optional `max_chars` limit; an insert that would go past the limit is
  refused.
- `emberkit.textedit_undo`: `UndoState`, a bounded undo/redo history. Its
  record count and character count are fixed (99 and 999 by default).
  When it runs out of room it drops the oldest entries.
- `emberkit.objfile`: checks for Wavefront OBJ files.
  - `get_obj_file_info(path, verbose)` returns an `ObjFileInfo` with the
    counts of vertices, normals, texture coordinates and faces. With
    `verbose` it also keeps the first ten vertex lines.
  - `verify_and_fix_obj_file(source_path, dest_path)` writes a trimmed
    copy. Blank lines are dropped. `v` and `vn` lines are rewritten with
    their first three numbers, and every other line is copied as it is.
    It returns a `FixReport`.
  - `parse_floats(text)` reads the single-precision numbers in a string.
  - A file that cannot be opened raises `OSError`.
- `emberkit.matrix`: 4x4 matrices stored as tuples of rows, with the
  translation in the last row. It has `identity`, `scale_matrix`,
  `rotate_z_matrix`, `multiply` and `billboard_matrix`.
- `emberkit.particles`: a CPU particle system.
  - `ParticleManager` keeps named `ParticleGroup`s. `emit` draws each
    particle's properties uniformly from the ranges in an `EmitSettings`.
  - `update(view_matrix, view_projection)` advances one frame of 1/60 s.
    It removes expired particles and blends size and colour over each
    particle's lifetime. It then rebuilds the per-particle
    `ParticleInstance` list, which holds the world matrix, the
    world-view-projection matrix and the colour, up to `MAX_INSTANCE_COUNT`
    per group.
  - `ParticleEmitter` emits a burst of five times its count when it is
    created. After that it emits `emit_count` particles `emit_rate` times
    per second of updates.
- `emberkit.utility`: `decode_utf8` and `encode_utf8` replace invalid
  input with U+FFFD. `log` writes debug messages to the `emberkit`
  logger.

## Installation

```
pip install .
```

## Examples

Packing rectangles:

```python
from emberkit.rectpack import Rect, RectPacker

packer = RectPacker(256, 256, 256)
rects = [Rect(id=0, w=64, h=32), Rect(id=1, w=128, h=128)]
all_packed = packer.pack(rects)
for rect in rects:
    print(rect.id, rect.x, rect.y, rect.was_packed)
```

Editing text:

```python
from emberkit.textedit import Key, TextEditor
from emberkit.textedit_layout import SimpleTextBuffer

buffer = SimpleTextBuffer("hello", 8.0, 16.0, 80)
editor = TextEditor(buffer, False)
editor.key(Key.TEXTEND)
editor.paste(" world")
print(buffer.text)        # hello world
editor.key(Key.UNDO)
print(buffer.text)        # hello
```

Simulating particles:

```python
from emberkit.matrix import identity
from emberkit.particles import EmitSettings, ParticleManager

manager = ParticleManager(seed=1)
manager.create_group("smoke", "particle/smoke.png")
manager.emit("smoke", (0.0, 0.0, 0.0), 10, EmitSettings())
manager.update(identity(), identity())
print(manager.particle_count("smoke"), len(manager.instances("smoke")))
```

## What it does not do

- It draws nothing and opens no window. The particle system only produces
  matrices and colours, which a renderer has to draw.
- A group's texture path is stored but never loaded.
- The text editor does no rendering or word wrapping. Layout comes from
  the buffer you give it.
- There is no command-line program.

## Running the tests

```
pip install .[test]
pytest
```