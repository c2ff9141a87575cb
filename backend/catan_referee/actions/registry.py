"""
Registry mapping command kinds to Action and FollowUpAction classes.
"""
from typing import Dict, List, Optional, Type, Union

from .base import Action, FollowUpAction

ActionClass = Union[Type[Action], Type[FollowUpAction]]


class ActionRegistry:
    """
    Central lookup of command kinds.

    Usage:
        @ActionRegistry.register
        class BuildRoad(Action):
            kind = "buildRoad"

        ActionRegistry.get_action("buildRoad")
    """

    _actions: Dict[str, Type[Action]] = {}
    _follow_ups: Dict[str, Type[FollowUpAction]] = {}

    @classmethod
    def register(cls, action_class: ActionClass) -> ActionClass:
        """Register a class under its ``kind``. Usable as a decorator."""
        if not action_class.kind:
            raise ValueError(f"{action_class.__name__} has no kind")
        if issubclass(action_class, Action):
            cls._actions[action_class.kind] = action_class
        elif issubclass(action_class, FollowUpAction):
            cls._follow_ups[action_class.kind] = action_class
        else:
            raise TypeError(f"{action_class!r} is not an action")
        return action_class

    @classmethod
    def get_action(cls, kind: str) -> Optional[Type[Action]]:
        return cls._actions.get(kind)

    @classmethod
    def is_follow_up(cls, kind: str) -> bool:
        return kind in cls._follow_ups

    @classmethod
    def action_kinds(cls) -> List[str]:
        return sorted(cls._actions)

    @classmethod
    def follow_up_kinds(cls) -> List[str]:
        return sorted(cls._follow_ups)
