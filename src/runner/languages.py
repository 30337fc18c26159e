"""Interpreter table: adding a language is a new row here, not new control flow."""
from __future__ import annotations

import os
import shutil

from pydantic import BaseModel, ConfigDict

from src.core.contracts.runner import Language
from src.core.exceptions import RuntimeUnavailableError


class LanguageSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    interpreter: str  # absolute path, or a bare name looked up on PATH
    extension: str
    args: tuple[str, ...] = ()


LANGUAGES: dict[Language, LanguageSpec] = {
    Language.SWIFT: LanguageSpec(interpreter="/usr/bin/swift", extension=".swift"),
    Language.SHELL: LanguageSpec(interpreter="/bin/bash", extension=".sh"),
    Language.PYTHON: LanguageSpec(interpreter="python3", extension=".py"),
    Language.JAVASCRIPT: LanguageSpec(interpreter="node", extension=".js"),
    Language.RUBY: LanguageSpec(interpreter="ruby", extension=".rb"),
}


def get_language_spec(language: Language, overrides: dict[Language, str] | None = None) -> LanguageSpec:
    spec = LANGUAGES[language]
    override = (overrides or {}).get(language)
    if override:
        spec = spec.model_copy(update={"interpreter": override})
    return spec


def resolve_interpreter(language: Language, spec: LanguageSpec) -> str:
    """Return an executable path for the interpreter or raise RuntimeUnavailableError."""
    interpreter = spec.interpreter
    if os.path.isabs(interpreter) or os.sep in interpreter:
        if os.path.isfile(interpreter) and os.access(interpreter, os.X_OK):
            return interpreter
        raise RuntimeUnavailableError(language.value, interpreter)
    found = shutil.which(interpreter)
    if not found:
        raise RuntimeUnavailableError(language.value, interpreter)
    return found
