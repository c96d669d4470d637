"""
Editor store: keeps the skill tree and the editor graph in sync.

The store owns the skill definition (whose execution root is the tree),
the live graph and the read-only entity reference registry. Loading a
definition materializes the tree into a fresh graph; exporting
reconstructs the tree from the graph. All node editing happens on the
graph, so between a load and the next export the stored tree is stale.

Stores are independent objects; create one per open skill.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping

from skillflow.config import Config
from skillflow.exceptions import SchemaError, SkillDefinitionError
from skillflow.graph import (
    EdgeChange,
    Graph,
    NodeChange,
    ReorderDirection,
    apply_edge_changes,
    apply_node_changes,
    lifecycle,
    make_id_factory,
    materialize,
    reconstruct,
    validate_graph,
)
from skillflow.graph.models import IdFactory
from skillflow.graph.validation import GraphValidationResult
from skillflow.schema import (
    ActionNode,
    ActionNodeType,
    EntityReference,
    EntityType,
    FloatRange,
    Metadata,
    QualityType,
    SkillCategory,
    SkillEntityDefinition,
    SkillIndicator,
    SkillTargetType,
    default_skill_definition,
)

from .references import EntityReferences, freeze_references

logger = logging.getLogger(__name__)

Subscriber = Callable[["SkillEditorStore"], None]


class SkillEditorStore:
    """
    Coordinates the skill tree and its editor graph.

    Example usage:
        store = SkillEditorStore()
        store.import_json(text)

        root_id = store.graph.root_candidates()[0].id
        new_id = store.add_node(ActionNodeType.DELAY, root_id)
        store.reorder_node(new_id, "left")

        text = store.export_json()
    """

    def __init__(
        self,
        definition: SkillEntityDefinition | None = None,
        entity_references: Mapping | None = None,
        config: Config | None = None,
        id_factory: IdFactory | None = None,
    ):
        """
        Initialize the store.

        Args:
            definition: Skill to edit (an empty skill if not given)
            entity_references: Known entity references by type
            config: Editor configuration (defaults if not given)
            id_factory: Node id generator (uses config.editor.id_prefix if not given)
        """
        self.config = config or Config()
        self._id_factory = id_factory or make_id_factory(self.config.editor.id_prefix)
        self._subscribers: list[Subscriber] = []
        self.entity_references: EntityReferences = freeze_references(entity_references)
        self.graph = Graph()
        self.definition = definition or default_skill_definition(self.config.editor.default_owner)
        self._materialize()

    # ==================== State ====================

    @property
    def tree(self) -> ActionNode | None:
        """Execution root as of the last load or sync (stale while editing)."""
        return self.definition.entity.execution_root

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback run after every state change.

        Returns:
            Function that removes the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    def _set_graph(self, graph: Graph) -> Graph:
        if graph is not self.graph:
            self.graph = graph
            self._notify()
        return self.graph

    def _materialize(self) -> None:
        root = self.definition.entity.execution_root
        if root is None:
            self.graph = Graph()
            return
        self.graph = materialize(root, self.config.layout, self._id_factory)

    # ==================== Load / export ====================

    def set_skill_data(self, definition: SkillEntityDefinition) -> Graph:
        """Replace the skill and rebuild the graph from its tree."""
        self.definition = definition
        self._materialize()
        logger.info(
            f"Loaded skill '{definition.key or definition.entity.metadata.title}' "
            f"({len(self.graph.nodes)} nodes)"
        )
        self._notify()
        return self.graph

    def load_tree(self, tree: ActionNode) -> Graph:
        """Replace only the execution root and rebuild the graph."""
        self.definition.entity.execution_root = tree
        self._materialize()
        self._notify()
        return self.graph

    def sync_tree(self) -> ActionNode | None:
        """
        Rebuild the tree from the graph.

        The stored execution root is only replaced when the graph yields a
        tree; an empty or rootless graph leaves it as it was.

        Returns:
            The reconstructed tree, or None
        """
        if self.config.editor.prune_orphans_on_export:
            self._set_graph(lifecycle.prune_unreachable(self.graph))

        tree = reconstruct(self.graph)
        if tree is None:
            logger.warning("Graph produced no tree; keeping previous execution root")
            return None

        self.definition.entity.execution_root = tree
        self._notify()
        return tree

    def export_dict(self) -> dict:
        """Sync the tree and return the definition as a dictionary."""
        self.sync_tree()
        return self.definition.to_dict()

    def export_json(self) -> str:
        """Sync the tree and serialize the skill definition."""
        return json.dumps(self.export_dict(), indent=self.config.editor.json_indent)

    def import_json(self, text: str) -> Graph:
        """
        Load a skill definition from JSON text.

        Raises:
            SkillDefinitionError: If the text is not a valid skill definition.
                The store is left unchanged.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SkillDefinitionError(f"Failed to parse JSON: {e}") from e

        if not isinstance(data, dict):
            raise SkillDefinitionError("Skill definition must be a JSON object")

        try:
            definition = SkillEntityDefinition.from_dict(data)
        except (SchemaError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise SkillDefinitionError(f"Invalid skill definition: {e}") from e

        return self.set_skill_data(definition)

    def validate(self) -> GraphValidationResult:
        """Check the graph's tree invariants."""
        return validate_graph(self.graph)

    # ==================== Node lifecycle ====================

    def add_node(self, node_type: ActionNodeType | str, parent_id: str | None = None) -> str | None:
        """
        Add a default node of ``node_type`` under ``parent_id``.

        Returns:
            New node id, or None if the parent Requirement already has a child
        """
        graph, new_id = lifecycle.add_node(
            self.graph,
            node_type,
            parent_id,
            layout=self.config.layout,
            id_factory=self._id_factory,
            owner=self.config.editor.default_owner,
        )
        self._set_graph(graph)
        return new_id

    def update_node(self, node_id: str, partial: Mapping[str, Any]) -> Graph:
        return self._set_graph(lifecycle.update_node(self.graph, node_id, partial))

    def remove_node(self, node_id: str) -> Graph:
        return self._set_graph(lifecycle.remove_node(self.graph, node_id))

    def reorder_node(self, node_id: str, direction: ReorderDirection | str) -> Graph:
        return self._set_graph(lifecycle.reorder_node(self.graph, node_id, direction))

    def connect(self, source_id: str, target_id: str) -> Graph:
        return self._set_graph(lifecycle.connect(self.graph, source_id, target_id))

    def move_node(self, node_id: str, x: float, y: float) -> Graph:
        return self._set_graph(lifecycle.move_node(self.graph, node_id, x, y))

    def prune_unreachable(self) -> Graph:
        return self._set_graph(lifecycle.prune_unreachable(self.graph))

    def set_nodes(self, graph: Graph) -> Graph:
        """Replace the graph wholesale (e.g. after an external layout pass)."""
        return self._set_graph(graph)

    # ==================== Canvas intents ====================

    def on_nodes_change(self, changes: Iterable[NodeChange]) -> Graph:
        """Apply node moves/removals/additions reported by the canvas."""
        return self._set_graph(apply_node_changes(self.graph, changes))

    def on_edges_change(self, changes: Iterable[EdgeChange]) -> Graph:
        """Apply edge additions/removals reported by the canvas."""
        return self._set_graph(apply_edge_changes(self.graph, changes))

    def on_connect(self, source_id: str, target_id: str) -> Graph:
        """Handle a connection drawn on the canvas."""
        return self.connect(source_id, target_id)

    # ==================== Skill fields ====================

    def _update_entity(self, **changes: Any) -> None:
        self.definition.entity = replace(self.definition.entity, **changes)
        self._notify()

    def update_metadata(self, title: str, description: str) -> None:
        self._update_entity(metadata=Metadata(title=title, description=description))

    def update_basic_info(
        self,
        quality: QualityType,
        categories: list[SkillCategory],
        cooldown: float,
        target_type: SkillTargetType,
    ) -> None:
        self._update_entity(
            quality=quality,
            categories=list(categories),
            cooldown=cooldown,
            target_type=target_type,
        )

    def update_cost(self, mana: float) -> None:
        self._update_entity(mana_cost=mana)

    def update_cast_distance(self, min_distance: float, max_distance: float) -> None:
        self._update_entity(cast_distance=FloatRange(min=min_distance, max=max_distance))

    def set_icon_reference(self, icon_reference: EntityReference) -> None:
        self._update_entity(icon_reference=icon_reference)

    def set_indicators(self, indicators: list[SkillIndicator]) -> None:
        self._update_entity(indicators=list(indicators))

    def update_entity_definition(self, definition: SkillEntityDefinition) -> None:
        """Replace the definition without touching the graph."""
        self.definition = definition
        self._notify()

    # ==================== Entity references ====================

    def set_entity_references(self, references: Mapping) -> None:
        self.entity_references = freeze_references(references)
        self._notify()

    def get_entity_references_by_type(self, entity_type: EntityType | str) -> tuple[EntityReference, ...]:
        if not isinstance(entity_type, EntityType):
            entity_type = EntityType(entity_type)
        return self.entity_references[entity_type]
