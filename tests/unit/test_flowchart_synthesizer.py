import pytest

from stepflow.config.settings import Settings
from stepflow.core.exceptions import (
    AmbiguousTransitionError,
    EmptyPlanError,
    UnresolvedContinuationError,
)
from stepflow.flowchart import generate_flowchart, normalize_levels, parse_lines, synthesize


def _edges(flowchart):
    return [(edge.source, edge.target) for edge in flowchart.edges]


def _node(flowchart, node_id):
    node = flowchart.get_node(node_id)
    assert node is not None, node_id
    return node


class TestConnectivity:
    def test_linear_plan_uses_simple_edges(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2: B\nStep 3: C", settings=settings)
        assert _edges(chart) == [("step-1", "step-2"), ("step-2", "step-3")]
        assert {edge.kind for edge in chart.edges} == {"simple"}
        assert all(edge.stroke == settings.simple_stroke for edge in chart.edges)
        assert chart.edges[0].id == "e-step-1-step-2"

    def test_fan_out_from_single_step(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2a: B\nStep 2b: C", settings=settings)
        assert _edges(chart) == [("step-1", "step-2a"), ("step-1", "step-2b")]
        assert all(edge.kind == "fan" for edge in chart.edges)
        assert all(edge.stroke == settings.fan_stroke for edge in chart.edges)

    def test_fan_in_to_single_step(self, settings):
        chart = generate_flowchart("Step 1a: A\nStep 1b: B\nStep 2: C", settings=settings)
        assert _edges(chart) == [("step-1a", "step-2"), ("step-1b", "step-2")]
        assert all(edge.kind == "fan" for edge in chart.edges)

    def test_continuation_overrides_previous_level(self, settings):
        chart = generate_flowchart(
            "Step 1: Start\nStep 2a: X\nStep 2b: Y\nStep 3: from 2a: Z", settings=settings
        )
        into_three = [source for source, target in _edges(chart) if target == "step-3"]
        assert into_three == ["step-2a"]
        edge = chart.edges[-1]
        assert edge.kind == "continuation"
        assert edge.stroke == settings.simple_stroke

    def test_continuation_from_several_steps_uses_fan_style(self, settings):
        chart = generate_flowchart(
            "Step 1: A\nStep 2a: B\nStep 2b: C\nStep 2c: D\nStep 3: (from 2a,2c) E",
            settings=settings,
        )
        into_three = [edge for edge in chart.edges if edge.target == "step-3"]
        assert [edge.source for edge in into_three] == ["step-2a", "step-2c"]
        assert all(edge.stroke == settings.fan_stroke for edge in into_three)

    def test_continuation_may_skip_levels(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2: B\nStep 3: from 1: C", settings=settings)
        assert _edges(chart) == [("step-1", "step-2"), ("step-1", "step-3")]

    def test_fallback_lines_form_a_chain(self, settings):
        chart = generate_flowchart("hello\nworld", settings=settings)
        assert [node.label for node in chart.nodes] == ["hello", "world"]
        assert [node.level for node in chart.nodes] == [1, 2]
        assert _edges(chart) == [("step-1", "step-2")]

    def test_repeated_reference_yields_one_edge(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2: from 1, 1: B", settings=settings)
        assert _edges(chart) == [("step-1", "step-2")]

    def test_single_step_plan_has_no_edges(self, settings):
        chart = generate_flowchart("Step 1: Only", settings=settings)
        assert len(chart.nodes) == 1
        assert chart.edges == []


class TestManyToMany:
    PLAN = "Step 1a: A\nStep 1b: B\nStep 2a: C\nStep 2b: D"

    def test_bipartite_by_default(self, settings):
        chart = generate_flowchart(self.PLAN, settings=settings)
        assert _edges(chart) == [
            ("step-1a", "step-2a"),
            ("step-1b", "step-2a"),
            ("step-1a", "step-2b"),
            ("step-1b", "step-2b"),
        ]
        assert all(edge.kind == "bipartite" for edge in chart.edges)
        assert all(edge.stroke_width == settings.bipartite_stroke_width for edge in chart.edges)

    def test_strict_policy_rejects(self):
        settings = Settings(_env_file=None, many_to_many_policy="strict")
        with pytest.raises(AmbiguousTransitionError):
            generate_flowchart(self.PLAN, settings=settings)

    def test_strict_policy_accepts_explicit_continuations(self):
        settings = Settings(_env_file=None, many_to_many_policy="strict")
        chart = generate_flowchart(
            "Step 1a: A\nStep 1b: B\nStep 2a: from 1a: C\nStep 2b: from 1b: D", settings=settings
        )
        assert _edges(chart) == [("step-1a", "step-2a"), ("step-1b", "step-2b")]


class TestDanglingContinuation:
    PLAN = "Step 1: A\nStep 2: from 7: B"

    def test_keep_emits_dangling_edge(self, settings):
        chart = generate_flowchart(self.PLAN, settings=settings)
        assert _edges(chart) == [("step-7", "step-2")]

    def test_drop_removes_dangling_edge(self):
        chart = generate_flowchart(self.PLAN, settings=Settings(_env_file=None, continuation_policy="drop"))
        assert chart.edges == []

    def test_error_rejects_plan(self):
        settings = Settings(_env_file=None, continuation_policy="error")
        with pytest.raises(UnresolvedContinuationError):
            generate_flowchart(self.PLAN, settings=settings)

    def test_missing_branch_counts_as_dangling(self):
        settings = Settings(_env_file=None, continuation_policy="error")
        with pytest.raises(UnresolvedContinuationError):
            generate_flowchart("Step 2a: A\nStep 2b: B\nStep 3: from 2c: C", settings=settings)


class TestPlacement:
    def test_single_nodes_are_centered(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2: B", settings=settings)
        assert [(n.x, n.y) for n in chart.nodes] == [(-100, 0), (-100, 100)]

    def test_parallel_nodes_are_symmetric(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2a: B\nStep 2b: C\nStep 2c: D", settings=settings)
        assert [(n.x, n.y) for n in chart.nodes[1:]] == [(-250, 100), (0, 100), (250, 100)]

    def test_two_parallel_nodes(self, settings):
        chart = generate_flowchart("Step 1a: A\nStep 1b: B", settings=settings)
        assert [n.x for n in chart.nodes] == [-125, 125]

    def test_spacing_comes_from_settings(self):
        settings = Settings(_env_file=None, vertical_spacing=40, horizontal_spacing=100, node_width=80)
        chart = generate_flowchart("Step 1: A\nStep 2a: B\nStep 2b: C", settings=settings)
        assert [(n.x, n.y) for n in chart.nodes] == [(-40, 0), (-50, 40), (50, 40)]

    def test_node_styles_distinguish_parallel_levels(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2a: B\nStep 2b: C", settings=settings)
        single, left, right = chart.nodes
        assert (single.background, single.border_color) == (settings.single_background, settings.single_border)
        assert (left.background, left.border_color) == (settings.parallel_background, settings.parallel_border)
        assert right.background == settings.parallel_background
        assert all(n.source_position == "bottom" and n.target_position == "top" for n in chart.nodes)

    def test_empty_step_text_still_placed(self, settings):
        chart = generate_flowchart("Step 1:\nStep 2: B", settings=settings)
        assert chart.nodes[0].label == ""
        assert len(chart.edges) == 1


class TestMarkers:
    def test_start_and_end(self, sample_plan, settings):
        chart = generate_flowchart(sample_plan, settings=settings)
        starts = [n.id for n in chart.nodes if n.is_start]
        ends = [n.id for n in chart.nodes if n.is_end]
        assert starts == ["step-1"]
        assert ends == ["step-6"]
        assert chart.nodes[0].start_marker.glyph == settings.start_glyph
        assert chart.nodes[-1].end_marker.visible

    def test_parallel_first_and_last_levels(self, settings):
        chart = generate_flowchart("Step 1a: A\nStep 1b: B\nStep 2a: from 1a: C\nStep 2b: D", settings=settings)
        assert [n.id for n in chart.nodes if n.is_start] == ["step-1a"]
        assert [n.id for n in chart.nodes if n.is_end] == ["step-2a", "step-2b"]

    def test_single_step_is_start_and_end(self, settings):
        [node] = generate_flowchart("Just one thing", settings=settings).nodes
        assert node.is_start and node.is_end


class TestPipelineProperties:
    def test_empty_input_is_rejected(self, settings):
        with pytest.raises(EmptyPlanError):
            generate_flowchart("   \n\t\n", settings=settings)

    def test_synthesize_rejects_empty_steps(self):
        with pytest.raises(EmptyPlanError):
            synthesize([])

    def test_regeneration_is_identical(self, sample_plan, settings):
        first = generate_flowchart(sample_plan, settings=settings)
        second = generate_flowchart(sample_plan, settings=settings)
        assert first.to_dict() == second.to_dict()

    def test_stages_compose_like_the_pipeline(self, sample_plan, settings):
        steps = normalize_levels(parse_lines(sample_plan))
        assert synthesize(steps, settings=settings).to_dict() == generate_flowchart(
            sample_plan, settings=settings
        ).to_dict()

    def test_edge_ids_are_unique(self, sample_plan, settings):
        chart = generate_flowchart(sample_plan, settings=settings)
        ids = chart.edge_ids()
        assert len(ids) == len(set(ids))


class TestNamespacing:
    def test_page_prefix_applies_to_nodes_and_edges(self, settings):
        chart = generate_flowchart("Step 1: A\nStep 2: B", page_id="home", settings=settings)
        assert chart.node_ids() == ["home-step-1", "home-step-2"]
        assert chart.edges[0].id == "e-home-step-1-home-step-2"
        assert all(node.page.page_id == "home" for node in chart.nodes)

    def test_continuations_are_prefixed(self, settings):
        chart = generate_flowchart("Step 1a: A\nStep 1b: B\nStep 2: from 1b: C", page_id="p1", settings=settings)
        assert _edges(chart) == [("p1-step-1b", "p1-step-2")]

    def test_two_pages_never_collide(self, sample_plan, settings):
        first = generate_flowchart(sample_plan, page_id="page-a", settings=settings)
        second = generate_flowchart(sample_plan, page_id="page-b", settings=settings)
        assert not set(first.node_ids()) & set(second.node_ids())
        assert not set(first.edge_ids()) & set(second.edge_ids())
