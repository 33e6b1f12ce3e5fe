"""StyleInspo: fashion look gallery, SEO generation and site theming."""

__version__ = "1.0.0"
