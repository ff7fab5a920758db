"""
Evaluation of submitted code against a persistent session namespace.

ScriptRunner is the console's evaluation engine. Each submission is parsed
with `ast`; when its last statement is an expression, that expression is
evaluated separately so its value becomes the result, like the standard
interactive interpreter. Everything else runs through `exec` and produces
NO_VALUE.

Results are one of three kinds:
  - Success(value): the code ran; `value` is NO_VALUE for pure statements
  - Error(exception): the code raised; the traceback starts at user code
  - Cancelled(): the user pressed Ctrl+C during evaluation

Each submission's source is registered in `linecache` under `<input-N>`, so
tracebacks and `inspect.getsource` can show the code that ran.
"""

from __future__ import annotations

import ast
import builtins
import codeop
import linecache
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .formatting.primitives import NO_VALUE
from .session import load_script

logger = logging.getLogger(__name__)

SESSION_MODULE = "__main__"


class EvaluationResult:
    """Base class of the outcomes of an evaluation."""


@dataclass(frozen=True)
class Success(EvaluationResult):
    value: Any


@dataclass(frozen=True)
class Error(EvaluationResult):
    exception: BaseException


@dataclass(frozen=True)
class Cancelled(EvaluationResult):
    pass


class ScriptRunner:
    def __init__(self):
        self.namespace: dict[str, Any] = {}
        self.submissions: list[str] = []
        self._counter = 0
        self.reset()

    def reset(self) -> None:
        """Start over with an empty session."""
        self.namespace.clear()
        self.namespace.update({"__name__": SESSION_MODULE, "__builtins__": builtins})
        self.submissions.clear()
        logger.debug("Session reset")

    def is_complete(self, code: str) -> bool:
        """Whether `code` can run as is, or the console should ask for more lines.

        Code with a syntax error counts as complete: evaluating it reports the error.
        """
        try:
            return codeop.compile_command(code, "<input>", "exec") is not None
        except (SyntaxError, OverflowError, ValueError):
            return True

    def evaluate(self, code: str) -> EvaluationResult:
        self._counter += 1
        filename = f"<input-{self._counter}>"
        linecache.cache[filename] = (len(code), None, code.splitlines(keepends=True), filename)
        logger.debug("Evaluating %s: %r", filename, code)

        try:
            value = self._run(code, filename)
        except KeyboardInterrupt:
            logger.debug("Evaluation of %s cancelled", filename)
            return Cancelled()
        except Exception as e:
            logger.debug("Evaluation of %s raised %s", filename, type(e).__name__)
            # Drop this module's frames so the traceback starts in user code.
            traceback = e.__traceback__
            while traceback is not None and traceback.tb_frame.f_code.co_filename == __file__:
                traceback = traceback.tb_next
            return Error(e.with_traceback(traceback))

        self.submissions.append(code)
        if value is not NO_VALUE and value is not None:
            self.namespace["_"] = value
        return Success(value)

    def _run(self, code: str, filename: str) -> Any:
        tree = ast.parse(code, filename, "exec")
        last = tree.body[-1] if tree.body and isinstance(tree.body[-1], ast.Expr) else None
        if last is not None:
            tree.body.pop()

        if tree.body:
            exec(compile(tree, filename, "exec"), self.namespace)
        if last is None:
            return NO_VALUE
        expression = ast.Expression(body=last.value)
        return eval(compile(expression, filename, "eval"), self.namespace)

    def load(self, path: Path) -> EvaluationResult | None:
        """Run a script file in the session, as if its content had been typed in.

        Returns None when the script cannot be read.
        """
        code = load_script(Path(path))
        if code is None:
            return None
        logger.info("Loading script %s", path)
        return self.evaluate(code)
