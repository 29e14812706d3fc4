"""Geração de objetos a partir de templates e clonagem de templates por instância."""

from .cloner import TemplateToInput, template_to_object, template_to_template  # noqa: F401
from .generator import SpecTemplateGenerator, TemplateGenerator  # noqa: F401
