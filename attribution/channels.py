"""
attribution/channels.py

Channel attribution rules.

A lead is attributed by its source name. Two rule families exist:

StaticRules
    Built-in source names, used when a client has no configured lists::

        {"PPC Pool", "CTC"} → ppc
        {"LSA"}             → lsa
        {"GMB"}             → seo

ConfiguredRules
    Per-client ``ppc_sources`` / ``lsa_sources`` / ``seo_sources`` lists.
    The lists are not guaranteed to be disjoint; a source present in more
    than one list is credited to every matching channel.

A source that matches nothing is attributed to no named channel. It still
counts toward the ``all`` total.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class Channel(str, Enum):
    PPC = "ppc"
    LSA = "lsa"
    SEO = "seo"


NAMED_CHANNELS: tuple[Channel, ...] = (Channel.PPC, Channel.LSA, Channel.SEO)

STATIC_PPC_SOURCES: frozenset[str] = frozenset({"PPC Pool", "CTC"})
STATIC_LSA_SOURCES: frozenset[str] = frozenset({"LSA"})
STATIC_SEO_SOURCES: frozenset[str] = frozenset({"GMB"})


class ChannelRule(ABC):
    """Maps a lead source name to the set of channels it is credited to."""

    @abstractmethod
    def sources_for(self, channel: Channel) -> frozenset[str]:
        """Return the source names attributed to *channel*."""

    def classify(self, source_name: str | None) -> frozenset[Channel]:
        """
        Return every channel whose source set contains *source_name*.

        An empty result means the lead belongs to "other".
        """
        if source_name is None:
            return frozenset()
        return frozenset(
            channel for channel in NAMED_CHANNELS if source_name in self.sources_for(channel)
        )


@dataclass(frozen=True)
class StaticRules(ChannelRule):
    def sources_for(self, channel: Channel) -> frozenset[str]:
        if channel is Channel.PPC:
            return STATIC_PPC_SOURCES
        if channel is Channel.LSA:
            return STATIC_LSA_SOURCES
        return STATIC_SEO_SOURCES


@dataclass(frozen=True)
class ConfiguredRules(ChannelRule):
    ppc: frozenset[str] = frozenset()
    lsa: frozenset[str] = frozenset()
    seo: frozenset[str] = frozenset()

    def sources_for(self, channel: Channel) -> frozenset[str]:
        return getattr(self, channel.value)

    @property
    def is_empty(self) -> bool:
        return not (self.ppc or self.lsa or self.seo)


def _clean(sources: Iterable[str] | None) -> frozenset[str]:
    if not sources:
        return frozenset()
    return frozenset(s for s in sources if isinstance(s, str) and s)


def resolve_channel_rule(
    ppc_sources: Iterable[str] | None = None,
    lsa_sources: Iterable[str] | None = None,
    seo_sources: Iterable[str] | None = None,
) -> ChannelRule:
    """
    Build the rule in effect for one client.

    Returns :class:`ConfiguredRules` when at least one list is non-empty,
    otherwise falls back to :class:`StaticRules`.
    """
    configured = ConfiguredRules(
        ppc=_clean(ppc_sources),
        lsa=_clean(lsa_sources),
        seo=_clean(seo_sources),
    )
    if configured.is_empty:
        return StaticRules()
    return configured
