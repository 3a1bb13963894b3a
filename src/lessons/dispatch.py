"""
Block dispatch: block type -> interaction handler and completion policy.
"""

from dataclasses import dataclass
from typing import Optional

from lessons.blocks import BlockType, LessonBlock
from lessons.interactions import (
    BlockInteraction,
    MultipleChoiceInteraction,
    PresentationInteraction,
    SpellingChallengeInteraction,
    UnsupportedInteraction,
)


@dataclass(frozen=True)
class BlockPolicy:
    block_type: str
    handler: Optional[type[BlockInteraction]]  # None = unsupported
    auto_completes: bool

    @property
    def supported(self) -> bool:
        return self.handler is not None

    def create(self, block: LessonBlock) -> BlockInteraction:
        return (self.handler or UnsupportedInteraction)(block)


class BlockDispatcher:
    def __init__(self):
        self._policies: dict[str, BlockPolicy] = {}

    def register(self, block_type: str, handler: type[BlockInteraction], *, auto_completes: bool = False) -> None:
        if block_type in self._policies:
            raise ValueError(f"Block type {block_type} already registered")
        self._policies[block_type] = BlockPolicy(block_type, handler, auto_completes)

    def resolve(self, block_type: str) -> BlockPolicy:
        policy = self._policies.get(block_type)
        if policy is None:
            return BlockPolicy(block_type, None, False)
        return policy

    def list_types(self) -> list[str]:
        return list(self._policies.keys())


def build_dispatcher() -> BlockDispatcher:
    dispatcher = BlockDispatcher()
    dispatcher.register(BlockType.DISCOVERY.value, PresentationInteraction, auto_completes=True)
    dispatcher.register(BlockType.PRONUNCIATION.value, PresentationInteraction, auto_completes=True)
    dispatcher.register(BlockType.RECAP.value, PresentationInteraction, auto_completes=True)
    dispatcher.register(BlockType.MULTIPLE_CHOICE.value, MultipleChoiceInteraction)
    dispatcher.register(BlockType.SPELLING_CHALLENGE.value, SpellingChallengeInteraction)
    return dispatcher


DEFAULT_DISPATCHER = build_dispatcher()
