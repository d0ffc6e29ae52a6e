"""Resolve (group prefix, subgroup, slot name) addresses to layers."""

from __future__ import annotations

import logging

from cardflow.core.errors import SlotResolutionError
from cardflow.services.document.model import Layer, LayerGroup, SlotKind


LOGGER = logging.getLogger(__name__)


class SlotResolver:
    """Locate groups, subgroups and leaf slots by name.

    Group lookup matches by prefix and the first matching group wins, so
    ``profile-1`` also matches ``profile-1 copy`` (and ``profile-10``).
    When ``subgroup_fallback`` is on, a missing subgroup resolves to the outer
    group, as the templates were historically addressed; the fallback is logged.
    With it off, a missing subgroup fails resolution.
    """

    def __init__(self, *, subgroup_fallback: bool = True) -> None:
        self.subgroup_fallback = subgroup_fallback

    # ------------------------------------------------------------------
    @staticmethod
    def find_group(root: LayerGroup, prefix: str) -> LayerGroup | None:
        for group in root.groups:
            if group.name.startswith(prefix):
                return group
        return None

    def descend(self, group: LayerGroup, subgroup: str | None) -> LayerGroup | None:
        if not subgroup:
            return group
        for child in group.groups:
            if child.name == subgroup:
                return child
        if self.subgroup_fallback:
            LOGGER.warning(
                "slots.descend subgroup '%s' not found in '%s'; falling back to the group itself",
                subgroup,
                group.name,
            )
            return group
        return None

    @staticmethod
    def find_slot(group: LayerGroup, name: str, kind: SlotKind) -> Layer | None:
        for layer in group.leaves:
            if layer.name == name and layer.kind == kind:
                return layer
        return None

    # ------------------------------------------------------------------
    def resolve(
        self,
        root: LayerGroup,
        group_prefix: str,
        slot_name: str,
        subgroup: str | None = None,
        kind: SlotKind = SlotKind.TEXT,
    ) -> Layer:
        group = self.find_group(root, group_prefix)
        if group is None:
            raise SlotResolutionError(slot_name, group_prefix, subgroup)
        target = self.descend(group, subgroup)
        if target is None:
            raise SlotResolutionError(slot_name, group_prefix, subgroup)
        slot = self.find_slot(target, slot_name, kind)
        if slot is None:
            raise SlotResolutionError(slot_name, group_prefix, subgroup)
        LOGGER.debug("slots.resolve %s/%s/%s -> %s", group_prefix, subgroup or "-", slot_name, target.name)
        return slot

    def resolve_frame(self, root: LayerGroup, frame_name: str) -> Layer:
        """Frames are addressed by bare name at the document root."""

        frame = self.find_slot(root, frame_name, SlotKind.IMAGE)
        if frame is None:
            raise SlotResolutionError(frame_name)
        return frame


__all__ = ["SlotResolver"]
