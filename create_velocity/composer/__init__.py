"""Overlay composition pipeline.

Quick usage::

    from create_velocity.composer import Composer
    from create_velocity.models import ScaffoldOptions

    options = ScaffoldOptions(project_name="my-site", target_dir=Path("my-site"))
    project_path = await Composer().compose(options)
"""

from create_velocity.composer.pipeline import Composer, CompositionError, ConfigurationError, compose
from create_velocity.composer.stages import DEFAULT_STAGES, CompositionContext, Stage
from create_velocity.composer.template import TemplateFetcher, TemplateRetrievalError

__all__ = [
    "Composer",
    "CompositionContext",
    "CompositionError",
    "ConfigurationError",
    "DEFAULT_STAGES",
    "Stage",
    "TemplateFetcher",
    "TemplateRetrievalError",
    "compose",
]
