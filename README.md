# aionland

A set of small userland components. Each module works on its own and needs
nothing outside the standard library.

- `aionland.packages`: a package database with dependency-aware
  installation, related-package recommendations and detection of unused
  packages (`PackageManager`, `Package`, `PackageStatus`, `PackageError`).
- `aionland.editor`: code buffers, language detection from file
  extensions, pattern-based bug finding and line metrics (`CodeBuffer`,
  `Language`, `Severity`, `Diagnostic`, `CodeMetrics`, `open_file`,
  `detect_language`, `find_bugs`, `analyze_code`).
- `aionland.assist`: completion of the word under the cursor, template
  code generation and C unit-test skeletons (`Completion`,
  `get_completions`, `generate_code`, `extract_function_name`,
  `generate_tests`).
- `aionland.assistant`: a command assistant that routes requests by
  intent and keeps a bounded history (`Assistant`, `Intent`,
  `CommandResult`).
- `aionland.devops`: build jobs, test runs, CI pipelines, deployments
  with health checks and Markdown reports (`DevOpsEngine`, `BuildConfig`,
  `BuildJob`, `BuildStatus`, `Pipeline`, `PipelineStage`,
  `DeploymentConfig`, `DeployStrategy`, `DevOpsMetrics`, `TestResult`,
  `DeploymentError`).
- `aionland.compositor`: a window compositor drawing into an in-memory
  framebuffer, with smart placement, size prediction, focus and hit
  testing (`Compositor`, `Surface`, `Output`).
- `aionland.terminal`: an 80×25 text-mode screen with colour attributes,
  wrapping, scrolling and line input (`Terminal`, `Color`, `make_color`,
  `make_vga_entry`).

Progress messages go to the standard `logging` module under each module's
name.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Installing a package together with its dependencies:

```python
from aionland.packages import Package, PackageManager

pm = PackageManager(free_space=10**9)
pm.add_package(Package(name="make", version="4.4"))
pm.add_package(Package(name="gcc", version="13.2", dependencies=["make"]))
pm.install("gcc")
print(pm.recommend("gcc"))   # ['make', 'gdb', 'cmake']
print(pm.auto_cleanup())     # ['gcc']: nothing installed depends on it
```

Looking for likely bugs in source text:

```python
from aionland.editor import CodeBuffer, analyze_code, find_bugs

buf = CodeBuffer.from_text("demo.c", "char *p = malloc(10);\nstrcpy(p, s);\n")
for diag in find_bugs(buf):
    print(diag.line, diag.severity.name, diag.message)
print(analyze_code(buf).code_lines)
```

Completing the word at the cursor:

```python
from aionland.assist import get_completions
from aionland.editor import CodeBuffer

buf = CodeBuffer.from_text("a.c", "int counter = 0;\ncou")
buf.cursor_line, buf.cursor_column = 1, 3
print([c.completion for c in get_completions(buf)])   # ['counter']
```

Asking the assistant. Intents come from a classifier you supply; without
one every command is treated as not understood:

```python
from aionland.assistant import Assistant, Intent

assistant = Assistant("Demo User", classifier=lambda text: Intent.SYSTEM_QUERY)
print(assistant.process_command("What's the CPU usage?").response)
```

Running a build:

```python
import random
from aionland.devops import BuildConfig, DevOpsEngine

engine = DevOpsEngine(rng=random.Random(1), sleeper=lambda seconds: None)
job = engine.start_build(engine.create_build_job(BuildConfig()))
print(job.status, job.tests_passed, job.tests_failed)
print(engine.render_report())
```

Placing a window and finding it again:

```python
from aionland.compositor import Compositor

comp = Compositor(640, 480)
win = comp.create_surface("terminal")   # sized 640x480 after clamping
win.mapped = True
print(comp.surface_at(win.x + 1, win.y + 1) is win)   # True
```

Driving the terminal:

```python
from aionland.terminal import Terminal

term = Terminal(execute=lambda line: f"ran {line}\n")
for ch in "ls\n":
    term.process_input(ch)
print(term.row_text(0))   # 'ls'
print(term.row_text(1))   # 'ran ls'
```

## Errors

Calls that fail raise an exception: `PackageError` for a missing package,
a circular dependency or too little disk space; `DeploymentError` (with
`rolled_back` set when automatic rollback was configured) for a deployment
that fails its health check; `ValueError` or `RuntimeError` when a size
limit is exceeded or an argument is invalid.

## What the package does not do

- There is no command-line program; every component is used from Python.
- `PackageManager.install` downloads, verifies and copies nothing: it
  checks dependencies and free space, then marks packages installed.
  `auto_cleanup` only reports unused packages; it removes nothing.
- Build steps, test outcomes and health checks in `DevOpsEngine` are
  simulated: tests and health probes pass at random (90%), and build
  time is predicted from the running average, not from a model.
- Intent classification, code generation and completion are rule and
  template based; no trained model is loaded or run.
- The compositor and terminal draw into Python lists; nothing is shown on
  a real display and no input devices are read.