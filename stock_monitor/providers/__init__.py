"""Quote provider implementations."""

from typing import Optional

from ..config import ProviderConfig, QuoteSource
from .base import QuoteProvider
from .sina import SinaQuoteProvider
from .tencent import TencentQuoteProvider

PROVIDERS: dict[QuoteSource, type[QuoteProvider]] = {
    QuoteSource.SINA: SinaQuoteProvider,
    QuoteSource.TENCENT: TencentQuoteProvider,
}


def get_provider(
    source: str | QuoteSource,
    config: Optional[ProviderConfig] = None,
) -> QuoteProvider:
    """Instantiate the provider registered for ``source``.

    Raises:
        ValueError: If no provider is registered for the source.
    """
    if not isinstance(source, QuoteSource):
        try:
            source = QuoteSource(str(source).lower())
        except ValueError:
            raise ValueError(f"Unknown quote source: {source}") from None

    provider_cls = PROVIDERS.get(source)
    if provider_cls is None:
        raise ValueError(f"Unknown quote source: {source}")
    return provider_cls(config)


__all__ = [
    "PROVIDERS",
    "QuoteProvider",
    "SinaQuoteProvider",
    "TencentQuoteProvider",
    "get_provider",
]
