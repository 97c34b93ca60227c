"""Flag gate evaluation for room actions and exits."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from soulstone.domain.defs import ActionDef, ExitDef
from soulstone.domain.flags import FLAG_FALSE, FlagStore

logger = logging.getLogger(__name__)


def _valid_name(name: object) -> bool:
    return isinstance(name, str) and bool(name.strip())


def _warn_invalid(name: object, context: str) -> None:
    logger.warning("Invalid gate %r in %s; treating it as unsatisfied.", name, context)


def all_true(names: Iterable[str], flags: FlagStore, context: str) -> bool:
    for name in names:
        if not _valid_name(name):
            _warn_invalid(name, context)
            return False
        if not flags.is_true(name):
            return False
    return True


def all_false(names: Iterable[str], flags: FlagStore, context: str) -> bool:
    for name in names:
        if not _valid_name(name):
            _warn_invalid(name, context)
            return False
        if not flags.is_false(name):
            return False
    return True


def is_exit_open(exit_def: ExitDef, flags: FlagStore) -> bool:
    context = f"exit '{exit_def.exit_name}'"
    return all_true(exit_def.conditions, flags, context) and all_false(
        exit_def.conditions_not, flags, context
    )


def action_specificity(action: ActionDef, flags: FlagStore) -> int | None:
    """
    Score how specifically an action's gate matches, or None when it is unsatisfied.

    A satisfied flag_true counts 2. A flag_false counts 2 when the flag is an
    explicit "false" and 1 when it is merely absent. An ungated action scores 0.
    """
    context = f"action '{action.action_id}'"
    score = 0
    if action.flag_true is not None:
        if not _valid_name(action.flag_true):
            _warn_invalid(action.flag_true, context)
            return None
        if not flags.is_true(action.flag_true):
            return None
        score += 2
    if action.flag_false is not None:
        if not _valid_name(action.flag_false):
            _warn_invalid(action.flag_false, context)
            return None
        if not flags.is_false(action.flag_false):
            return None
        score += 2 if flags.get(action.flag_false) == FLAG_FALSE else 1
    return score


def is_action_available(action: ActionDef, flags: FlagStore) -> bool:
    return action_specificity(action, flags) is not None


def resolve_actions(actions: Sequence[ActionDef], flags: FlagStore) -> List[ActionDef]:
    """Return satisfied actions, keeping only the most specific variant per label."""
    best: Dict[str, tuple[int, int, ActionDef]] = {}
    for index, action in enumerate(actions):
        score = action_specificity(action, flags)
        if score is None:
            continue
        current = best.get(action.label)
        if current is None:
            best[action.label] = (score, index, action)
            continue
        logger.debug("Ambiguous action label '%s' resolved by gate specificity.", action.label)
        if score > current[0]:
            best[action.label] = (score, current[1], action)
    return [entry[2] for entry in sorted(best.values(), key=lambda entry: entry[1])]


def resolve_exits(exits: Sequence[ExitDef], flags: FlagStore) -> List[ExitDef]:
    """Return open exits, keeping the first declared exit per label."""
    resolved: Dict[str, ExitDef] = {}
    for exit_def in exits:
        if not is_exit_open(exit_def, flags):
            continue
        if exit_def.exit_name in resolved:
            logger.debug("Ambiguous exit '%s'; keeping first declared.", exit_def.exit_name)
            continue
        resolved[exit_def.exit_name] = exit_def
    return list(resolved.values())
