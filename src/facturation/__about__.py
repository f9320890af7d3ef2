# Directly modelled on Donald Stufft's readme_renderer code:
# https://github.com/pypa/readme_renderer/blob/master/readme_renderer/__about__.py

__all__ = [
    "__title__",
    "__summary__",
    "__version__",
    "__license__",
]

__title__ = "Facturation"
__summary__ = "Clients, invoices and VAT totals for your billing application."

__version__ = "0.1.0"

__license__ = "BSD 3-Clause"
