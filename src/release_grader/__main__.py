"""Run the main grading step with ``python -m release_grader``."""

from .main import main

raise SystemExit(main())
