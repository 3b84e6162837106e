"""ember-less -- scaffolds Ember.js + Less front-end projects.

Quick usage::

    from ember_less.config import GeneratorOptions, ProjectConfig
    from ember_less.scaffolder import ScaffoldOrchestrator

    config = ProjectConfig(name="blog", emberModelLib="ember-data")
    await ScaffoldOrchestrator(config, GeneratorOptions(skip_install=True)).generate("./blog")

or from a shell::

    ember-less ./blog --karma --skip-install
"""

__version__ = "0.4.0"
