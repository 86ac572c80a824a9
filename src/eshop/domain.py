"""The storefront domain — catalogue, ordering and inventory elements register here.

Configuration is read from ``domain.toml`` beside this file; ``PROTEAN_ENV``
selects the overlay (``test``, ``production``) applied on top of the defaults.
"""

from protean.domain import Domain

eshop = Domain(name="eshop")
