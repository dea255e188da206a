"""Tests for layer descriptors, expansion and the default registry."""

import pytest

from strata.core.errors import ConfigurationError
from strata.orchestration.context import Action
from strata.orchestration.registry import (
    Layer,
    LayerRegistry,
    StackTarget,
    default_registry,
    expand_global,
    expand_regional,
)
from strata.stacks import programs


def _noop(stack_id):
    return {}


class TestExpansion:
    def test_global_expands_to_environment_only(self):
        assert expand_global("dev", ["r1", "r2"]) == [StackTarget("dev")]

    def test_regional_expands_one_per_region(self):
        assert expand_regional("dev", ["r1", "r2"]) == [
            StackTarget("r1-dev", "r1"),
            StackTarget("r2-dev", "r2"),
        ]

    def test_regional_with_no_regions(self):
        assert expand_regional("dev", []) == []

    def test_layer_expand_stacks_returns_fresh_list(self):
        layer = Layer("B", expand_regional, _noop)
        first = layer.expand_stacks("dev", ["r1"])
        first.reverse()
        first.append(StackTarget("x"))

        assert layer.expand_stacks("dev", ["r1"]) == [StackTarget("r1-dev", "r1")]


class TestLayerRegistry:
    def test_order_is_declaration_order(self):
        registry = LayerRegistry(
            [Layer(n, expand_regional, _noop) for n in ("a", "b", "c")]
        )

        assert registry.names() == ["a", "b", "c"]
        assert [layer.name for layer in registry.ordered(Action.DEPLOY)] == ["a", "b", "c"]
        assert [layer.name for layer in registry.ordered(Action.PREVIEW)] == ["a", "b", "c"]

    def test_destroy_is_full_reversal(self):
        registry = LayerRegistry(
            [Layer(n, expand_regional, _noop) for n in ("a", "b", "c")]
        )

        assert [layer.name for layer in registry.ordered(Action.DESTROY)] == ["c", "b", "a"]
        assert registry.names() == ["a", "b", "c"]

    def test_duplicate_names_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate layer names: a"):
            LayerRegistry([Layer("a", expand_global, _noop), Layer("a", expand_regional, _noop)])

    def test_get_and_len(self):
        registry = LayerRegistry([Layer("a", expand_global, _noop)])

        assert len(registry) == 1
        assert registry.get("a").name == "a"
        assert registry.get("missing") is None

    def test_registry_copies_input(self):
        layers = [Layer("a", expand_global, _noop)]
        registry = LayerRegistry(layers)
        layers.append(Layer("b", expand_global, _noop))

        assert registry.names() == ["a"]


class TestDefaultRegistry:
    def test_default_layer_order(self):
        assert default_registry().names() == [
            "acct-baseline",
            "net-foundation",
            "stateful-data",
            "svc-platform",
            "workloads",
        ]

    def test_only_first_layer_is_global(self):
        registry = default_registry()
        layers = list(registry)

        assert layers[0].expand_stacks("prd", ["r1", "r2"]) == [StackTarget("prd")]
        for layer in layers[1:]:
            assert [t.stack_id for t in layer.expand_stacks("prd", ["r1", "r2"])] == [
                "r1-prd",
                "r2-prd",
            ]

    def test_programs_publish_message_output(self):
        program = programs.net_foundation("us-east-1-dev")

        assert program["resources"] == {}
        assert program["outputs"]["message"] == (
            "Network foundation stack placeholder for us-east-1-dev"
        )

    @pytest.mark.parametrize(
        "layer",
        ["acct-baseline", "net-foundation", "stateful-data", "svc-platform", "workloads"],
    )
    def test_every_default_layer_builds_a_program(self, layer):
        program = default_registry().get(layer).provision("dev")

        assert set(program) == {"resources", "outputs"}
        assert "dev" in program["outputs"]["message"]
