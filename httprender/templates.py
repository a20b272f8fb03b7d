from collections.abc import Mapping

import jinja2

from .funcs import get_filters
from .statics import NAMED_TEMPLATE_PREFIX


class Templates:
    """Text and HTML `jinja2 <https://jinja.palletsprojects.com/>`_ environments.

    Both environments share their loaders: templates registered with
    :meth:`register` (or passed as ``templates``) and, when ``directory`` is
    given, files below it. Only the HTML environment escapes its values.

    :param directory: Optional directory to load named templates from.
    :param templates: Optional ``{name: source}`` mapping of named templates.
    :param filters: Extra filters, on top of :func:`httprender.funcs.get_filters`.
    :param context: Globals available to every template.
    """

    def __init__(self, directory=None, templates=None, filters=None, context=None):
        self.directory = directory
        self._named = {} if templates is None else {**templates}

        loaders = [jinja2.DictLoader(self._named)]
        if directory is not None:
            loaders.append(jinja2.FileSystemLoader([str(directory)]))
        loader = jinja2.ChoiceLoader(loaders)

        self._text = jinja2.Environment(loader=loader, autoescape=False)
        self._html = jinja2.Environment(loader=loader, autoescape=True)

        self.default_context = {} if context is None else {**context}
        for env in (self._text, self._html):
            env.filters.update(get_filters())
            env.filters.update(filters or {})
            env.globals.update(self.default_context)

    @property
    def context(self):
        return self._text.globals

    @context.setter
    def context(self, context):
        for env in (self._text, self._html):
            env.globals = {**self.default_context, **context}

    def register(self, name, source):
        """Registers ``source`` under ``name``, addressable as ``tmpl://name``."""
        self._named[name] = source

    def environment(self, html=False):
        return self._html if html else self._text

    def get_template(self, template, html=False):
        """Returns the compiled template for inline source or a ``tmpl://`` name."""
        env = self.environment(html)
        if template.startswith(NAMED_TEMPLATE_PREFIX):
            return env.get_template(template[len(NAMED_TEMPLATE_PREFIX) :])
        return env.from_string(template)

    def render(self, template, value, html=False):
        """Renders ``template`` against ``value``.

        The value is available as ``value``; when it is a mapping its keys are
        available directly as well.

        :param template: Inline template source, or ``tmpl://<name>``.
        :param value: Data to pass into the template.
        :param html: Use the autoescaping HTML environment.
        """
        context = {}
        if isinstance(value, Mapping):
            context.update(value)
        context["value"] = value
        return self.get_template(template, html=html).render(**context)
