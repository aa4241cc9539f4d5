"""
Game Tree - lazy expansion of the states reachable from a game state.

A node holds a state and, once expanded, its children: pairs of the
action taken and the resulting node. The action is a Move, or SKIP when
the team on duty had no legal move.

Expansion is incremental:
- expand_layer(tree) materializes one more frontier layer
- expand(tree, levels) repeats that a bounded number of times
- generate_whole_tree(state) repeats until nothing is left to expand

Used by:
1. The minimax strategy, for bounded-depth search
2. Tests, for exhaustive analysis of small boards
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, TypeVar, Union

from .moves import Move, apply_move, can_any_penguin_move, can_team_move, get_all_destinations
from .state import GameState

T = TypeVar("T")


@dataclass(frozen=True)
class Skip:
    """The action of a team that cannot move."""

    def __str__(self) -> str:
        return "skip"


SKIP = Skip()

Action = Union[Move, Skip]


@dataclass(frozen=True)
class GameTree:
    """
    A node of the game tree.

    children is None until the node is expanded; an empty tuple marks a
    terminal state (no team can move).
    """
    state: GameState
    children: tuple[tuple[Action, GameTree], ...] | None = None

    @property
    def is_expanded(self) -> bool:
        return self.children is not None

    def child(self, action: Action) -> GameTree | None:
        """The child reached by action, if it has been generated."""
        for child_action, node in self.children or ():
            if child_action == action:
                return node
        return None

    def depth(self) -> int:
        """Number of materialized levels below this node."""
        if not self.children:
            return 0
        return 1 + max(node.depth() for _, node in self.children)

    def size(self) -> int:
        """Number of materialized nodes, this one included."""
        return 1 + sum(node.size() for _, node in self.children or ())


def generate_children(state: GameState) -> list[tuple[Action, GameTree]]:
    """
    Generate the children of a state.

    Returns:
        [] if no team can move (terminal state)
        [(SKIP, node)] if only the team on duty is stuck
        one (move, node) pair per legal move otherwise, penguins in team
        order and destinations in direction order
    """
    if not can_any_penguin_move(state):
        return []

    team = state.current_team
    if not can_team_move(team, state):
        return [(SKIP, GameTree(state=state.skip_turn()))]

    children: list[tuple[Action, GameTree]] = []
    for penguin in team.penguins:
        for destination in get_all_destinations(penguin.position, state):
            move = Move(penguin.position, destination)
            children.append((move, GameTree(state=apply_move(state, state.players_turn, move))))
    return children


def has_more_states(tree: GameTree) -> bool:
    """Whether expanding the tree further would add nodes."""
    if tree.children is not None:
        return any(has_more_states(node) for _, node in tree.children)
    return can_any_penguin_move(tree.state)


def expand_layer(tree: GameTree) -> GameTree:
    """
    Return the tree with one more layer of children at its frontier.

    Terminal leaves stay as they are. If nothing can be expanded the
    result equals the input.
    """
    if tree.children is not None:
        return GameTree(
            state=tree.state,
            children=tuple((action, expand_layer(node)) for action, node in tree.children),
        )
    if can_any_penguin_move(tree.state):
        return GameTree(state=tree.state, children=tuple(generate_children(tree.state)))
    return GameTree(state=tree.state, children=())


def expand(tree: GameTree | GameState, levels: int) -> GameTree:
    """Expand up to levels more layers (stops early when complete)."""
    node = tree if isinstance(tree, GameTree) else GameTree(state=tree)
    for _ in range(levels):
        if not has_more_states(node):
            break
        node = expand_layer(node)
    return node


def generate_whole_tree(state: GameState) -> GameTree:
    """
    Materialize every state reachable from state.

    Only practical for small boards: the tree grows exponentially.
    """
    tree = GameTree(state=state)
    while has_more_states(tree):
        tree = expand_layer(tree)
    return tree


def is_state_within_children(children: list[tuple[Action, GameTree]], state: GameState) -> bool:
    return any(node.state == state for _, node in children)


def query_state(
    state: GameState,
    transitions: list[Callable[[GameState], GameState]],
) -> int | GameState:
    """
    Apply transitions in order, checking each against the game tree.

    Returns the index of the first transition whose result is not a
    child of the state it was applied to, or the final state when every
    transition is a legal action.
    """
    current = state
    for index, transition in enumerate(transitions):
        following = transition(current)
        if not is_state_within_children(generate_children(current), following):
            return index
        current = following
    return current


def fold_states(
    state: GameState,
    combinator: Callable[[GameState, T], T],
    base: T,
) -> T:
    """Fold combinator over every state reachable from state, depth first."""
    result = combinator(state, base)
    for _, node in generate_children(state):
        result = fold_states(node.state, combinator, result)
    return result


def fold_children(
    branch: tuple[Action | None, GameTree],
    combinator: Callable[[tuple[Action | None, GameTree], list[T]], T],
    max_depth: int,
) -> T:
    """
    Bottom-up fold over at most max_depth levels below branch.

    combinator receives the (action, node) pair and the folded values of
    its children (empty at the depth limit and at terminal states).
    """
    if max_depth == 0:
        return combinator(branch, [])
    _, node = branch
    values = [
        fold_children(child, combinator, max_depth - 1)
        for child in generate_children(node.state)
    ]
    return combinator(branch, values)
