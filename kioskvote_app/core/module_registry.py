"""Blueprint table for the kiosk server.

Each feature package exposes one blueprint; the table below says where it is
mounted, so ``bootstrap`` registers everything in one loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """A feature package and the blueprint it contributes."""

    import_path: str
    attribute: str
    url_prefix: Optional[str] = None

    @property
    def name(self) -> str:
        return self.import_path.rsplit('.', 1)[-1]

    def load_blueprint(self) -> Blueprint:
        blueprint = getattr(import_string(self.import_path), self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(f"{self.import_path}.{self.attribute} is not a Flask Blueprint")
        return blueprint


DEFAULT_MODULES: Tuple[ModuleDefinition, ...] = (
    # Kiosk page and font-size cache
    ModuleDefinition('kioskvote_app.modules.kiosk', 'kiosk_bp'),
    # Ballots and tallies
    ModuleDefinition('kioskvote_app.modules.voting', 'voting_bp', url_prefix='/api'),
    # Word-cloud precompute/commit and image serving
    ModuleDefinition('kioskvote_app.modules.results', 'results_bp'),
    # Display strings per language
    ModuleDefinition('kioskvote_app.modules.i18n', 'i18n_bp', url_prefix='/api'),
)


def register_modules(app: Flask, modules: Sequence[ModuleDefinition] = DEFAULT_MODULES) -> None:
    for module in modules:
        app.register_blueprint(module.load_blueprint(), url_prefix=module.url_prefix)
        app.logger.debug("Registered %s at %s", module.name, module.url_prefix or '/')
