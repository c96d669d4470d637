"""Tests for the editor store."""

import itertools
import json

import pytest

from skillflow.config import Config, EditorConfig
from skillflow.editor import SkillEditorStore
from skillflow.exceptions import SkillDefinitionError
from skillflow.graph import NodeChange, EdgeChange
from skillflow.schema import (
    DelayNode,
    EntityReference,
    EntityType,
    FloatRange,
    QualityType,
    SequenceNode,
    SkillCategory,
    SkillEntityDefinition,
    SkillTargetType,
    SoundNode,
)


SKILL_JSON = {
    "id": "Octoio:Skill:Fireball:1",
    "owner": "Octoio",
    "type": "Skill",
    "key": "Fireball",
    "version": 1,
    "entity": {
        "metadata": {"title": "Fireball", "description": "Throws fire"},
        "quality": "Rare",
        "categories": ["Offense"],
        "cost": {"mana": 20},
        "cooldown": 4,
        "target_type": "Enemy",
        "execution_root": {
            "type": "Sequence",
            "name": "Root",
            "loop": 1,
            "children": [
                {"type": "Delay", "name": "Wind up", "delay": 0.5},
                {
                    "type": "Requirement",
                    "name": "Has staff",
                    "requirements": {
                        "operator": "All",
                        "requirements": [{"type": "WeaponCategory", "weapon_category": "Staff"}],
                    },
                    "child": {"type": "Hit", "name": "Burn"},
                },
            ],
        },
        "cast_distance": {"min": 1, "max": 12},
        "indicators": [],
    },
}


@pytest.fixture
def store():
    """Store loaded with the Fireball skill and deterministic ids."""
    counter = itertools.count(1)
    store = SkillEditorStore(id_factory=lambda: f"n{next(counter)}")
    store.import_json(json.dumps(SKILL_JSON))
    return store


class TestLoadExport:
    """Tests for loading and exporting skills."""

    def test_default_store(self):
        """A new store holds an empty Parallel root."""
        store = SkillEditorStore()
        assert len(store.graph.nodes) == 1
        assert store.graph.nodes[0].type == "Parallel"
        assert store.graph.nodes[0].data["name"] == "Root"

    def test_import_materializes(self, store):
        """Importing builds one node per tree node."""
        assert len(store.graph.nodes) == 4
        assert len(store.graph.edges) == 3
        assert store.definition.key == "Fireball"
        assert store.definition.entity.quality == QualityType.RARE
        assert store.definition.entity.mana_cost == 20

    def test_export_round_trip(self, store):
        """Exporting an unedited skill gives back the same tree."""
        exported = json.loads(store.export_json())
        root = exported["entity"]["execution_root"]

        assert [c["name"] for c in root["children"]] == ["Wind up", "Has staff"]
        assert root["children"][1]["child"]["name"] == "Burn"
        assert root["children"][1]["child"]["hit_effect"]["can_crit"] is True
        assert exported["entity"]["cost"] == {"mana": 20}
        assert exported["entity"]["cast_distance"] == {"min": 1, "max": 12}

    def test_export_indent(self, store):
        assert store.export_json().startswith('{\n  "id"')

    def test_import_invalid_json(self, store):
        """Malformed JSON raises and leaves the store as it was."""
        before = store.graph
        with pytest.raises(SkillDefinitionError):
            store.import_json("{not json")
        assert store.graph is before

    def test_import_non_object(self, store):
        with pytest.raises(SkillDefinitionError):
            store.import_json("[1, 2]")

    def test_import_unknown_node_type(self, store):
        data = json.loads(json.dumps(SKILL_JSON))
        data["entity"]["execution_root"] = {"type": "Teleport", "name": "?"}
        with pytest.raises(SkillDefinitionError):
            store.import_json(json.dumps(data))

    def test_load_tree(self, store):
        tree = SequenceNode(name="Other", children=[DelayNode()])
        store.load_tree(tree)
        assert len(store.graph.nodes) == 2
        assert store.tree == tree


class TestEditing:
    """Tests for edits flowing through to export."""

    def test_add_then_export(self, store):
        """An added node appears last under its parent on export."""
        root_id = store.graph.root_candidates()[0].id
        new_id = store.add_node("Sound", root_id)
        store.update_node(new_id, {"name": "Whoosh"})

        tree = store.sync_tree()
        assert [c.name for c in tree.children] == ["Wind up", "Has staff", "Whoosh"]
        assert store.tree is tree

    def test_reorder_then_export(self, store):
        root_id = store.graph.root_candidates()[0].id
        first = store.graph.children_of(root_id)[0].id
        store.reorder_node(first, "right")

        tree = store.sync_tree()
        assert [c.name for c in tree.children] == ["Has staff", "Wind up"]

    def test_requirement_add_rejected(self, store):
        gate = next(n for n in store.graph.nodes if n.type == "Requirement")
        assert store.add_node("Delay", gate.id) is None

    def test_remove_orphans_not_exported(self, store):
        gate = next(n for n in store.graph.nodes if n.type == "Requirement")
        store.remove_node(gate.id)

        tree = store.sync_tree()
        assert [c.name for c in tree.children] == ["Wind up"]
        # The detached Hit is still on the canvas
        assert any(n.type == "Hit" for n in store.graph.nodes)

    def test_prune_on_export(self):
        """prune_orphans_on_export drops detached nodes when syncing."""
        config = Config(editor=EditorConfig(prune_orphans_on_export=True))
        store = SkillEditorStore(config=config)
        store.import_json(json.dumps(SKILL_JSON))
        gate = next(n for n in store.graph.nodes if n.type == "Requirement")
        store.remove_node(gate.id)

        store.sync_tree()
        assert not any(n.type == "Hit" for n in store.graph.nodes)

    def test_sync_keeps_tree_when_graph_empty(self, store):
        tree = store.tree
        for node in list(store.graph.nodes):
            store.remove_node(node.id)
        assert store.sync_tree() is None
        assert store.tree is tree

    def test_canvas_intents(self, store):
        """Node and edge change batches go through the store."""
        hit = next(n for n in store.graph.nodes if n.type == "Hit")
        gate = next(n for n in store.graph.nodes if n.type == "Requirement")

        store.on_nodes_change([NodeChange.moved(hit.id, 3, 4)])
        assert store.graph.get_node(hit.id).position.x == 3

        store.on_edges_change([EdgeChange.removed(f"e{gate.id}-{hit.id}")])
        assert store.graph.outgoing(gate.id) == []

        store.on_connect(gate.id, hit.id)
        assert store.graph.has_edge(gate.id, hit.id)


class TestSubscribers:
    """Tests for change notification."""

    def test_notified_on_change(self, store):
        calls = []
        store.subscribe(lambda s: calls.append(len(s.graph.nodes)))

        root_id = store.graph.root_candidates()[0].id
        store.add_node("Delay", root_id)
        assert calls == [5]

    def test_not_notified_on_noop(self, store):
        calls = []
        store.subscribe(calls.append)
        store.reorder_node("missing", "left")
        assert calls == []

    def test_not_notified_on_tied_reorder(self, store):
        """Reordering siblings that share an x changes nothing."""
        root_id = store.graph.root_candidates()[0].id
        first, second = store.graph.children_of(root_id)
        store.move_node(second.id, first.position.x, second.position.y)

        calls = []
        store.subscribe(calls.append)
        graph = store.graph
        assert store.reorder_node(first.id, "right") is graph
        assert calls == []

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(calls.append)
        unsubscribe()
        store.update_cost(5)
        assert calls == []


class TestSkillFields:
    """Tests for skill-level updaters."""

    def test_updaters(self, store):
        store.update_metadata("Big Fireball", "Throws more fire")
        store.update_basic_info(QualityType.EPIC, [SkillCategory.OFFENSE], 8, SkillTargetType.POSITION)
        store.update_cost(35)
        store.update_cast_distance(2, 20)

        entity = store.definition.entity
        assert entity.metadata.title == "Big Fireball"
        assert entity.quality == QualityType.EPIC
        assert entity.cooldown == 8
        assert entity.target_type == SkillTargetType.POSITION
        assert entity.mana_cost == 35
        assert entity.cast_distance == FloatRange(2, 20)

    def test_updaters_keep_graph(self, store):
        graph = store.graph
        store.update_cost(1)
        assert store.graph is graph

    def test_icon_reference(self, store):
        icon = EntityReference(type=EntityType.IMAGE, key="Flame")
        store.set_icon_reference(icon)
        assert store.export_dict()["entity"]["icon_reference"]["key"] == "Flame"

    def test_update_entity_definition(self, store):
        store.update_entity_definition(SkillEntityDefinition(key="Other"))
        assert store.definition.key == "Other"


class TestEntityReferences:
    """Tests for the read-only reference registry."""

    def test_lookup(self):
        store = SkillEditorStore(
            entity_references={"Sound": [{"type": "Sound", "key": "hit1"}]}
        )
        sounds = store.get_entity_references_by_type(EntityType.SOUND)
        assert [s.key for s in sounds] == ["hit1"]
        assert store.get_entity_references_by_type("Animation") == ()

    def test_read_only(self, store):
        with pytest.raises(TypeError):
            store.entity_references[EntityType.SOUND] = ()

    def test_replace(self, store):
        store.set_entity_references({EntityType.CHARACTER: [EntityReference(type=EntityType.CHARACTER, key="Wolf")]})
        assert store.get_entity_references_by_type("Character")[0].key == "Wolf"

    def test_sound_node_round_trip(self):
        """Sound references survive load and export."""
        definition = SkillEntityDefinition(key="S")
        definition.entity.execution_root = SequenceNode(
            name="Root", children=[SoundNode(name="Boom", sound=EntityReference(key="hit1"))]
        )
        store = SkillEditorStore(definition=definition)
        exported = store.export_dict()
        assert exported["entity"]["execution_root"]["children"][0]["sound"]["key"] == "hit1"
