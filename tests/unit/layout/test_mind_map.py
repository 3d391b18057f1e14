"""Tests for the mind-map layout and its interaction model."""

import pytest

from docgraph.core.exceptions import LayoutError
from docgraph.layout.mind_map import (
    InteractionAction,
    MindMapNavigator,
    calculate_mind_map_layout,
    convert_to_mind_map_data,
    node_matches_search,
)


@pytest.fixture
def hub_graph(graph_parts):
    """Center links to four documents, one of which links further out."""
    doc, ext, link = graph_parts
    center = doc("center.md", title="Center")
    alpha = doc("alpha.md", title="Alpha", description="First letter")
    beta = doc("beta.md", title="Beta")
    gamma = doc("gamma.md", title="gamma")
    delta = doc("delta.md", title="Delta")
    far = doc("far/away.md", title="Far Away")
    github = ext("github.com", ["https://github.com/org/repo"])
    python = ext("python.org")
    nodes = [center, beta, gamma, alpha, delta, far, github, python]
    edges = [
        link(center, beta),
        link(alpha, center),
        link(center, gamma),
        link(center, delta),
        link(delta, far),
        link(center, github, external=True),
        link(far, python, external=True),
    ]
    return convert_to_mind_map_data(nodes, edges)


def _by_id(layout):
    return {n.id: n for n in layout.nodes}


class TestConversion:
    def test_neighbors_and_counts(self, hub_graph):
        nodes, links = hub_graph
        by_id = {n.id: n for n in nodes}

        assert by_id["doc-center.md"].connection_count == 5
        assert by_id["doc-alpha.md"].neighbors == frozenset({"doc-center.md"})
        assert by_id["doc-alpha.md"].height == 88
        assert by_id["doc-beta.md"].height == 52
        assert by_id["ext-github.com"].label == "github.com"
        assert by_id["ext-github.com"].urls == ["https://github.com/org/repo"]
        assert len(links) == 7


class TestLayout:
    def test_depth_one_columns_are_alphabetical(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, "center.md", max_depth=1)
        by_id = _by_id(layout)

        center = by_id["doc-center.md"]
        assert (center.x, center.y) == (600, 400)
        assert center.side == "center"
        assert center.width == pytest.approx(240 * 1.15)

        # Alpha, Beta | Delta, gamma
        left = [n for n in layout.nodes if n.side == "left"]
        right = [n for n in layout.nodes if n.side == "right"]
        assert [n.label for n in left] == ["Alpha", "Beta"]
        assert [n.label for n in right] == ["Delta", "gamma"]
        assert all(n.x == 300 for n in left)
        assert all(n.x == 900 for n in right)
        assert [n.y for n in left] == [355, 445]
        assert "doc-far/away.md" not in by_id

    def test_odd_tier_puts_extra_node_left(self, graph_parts):
        doc, _, link = graph_parts
        center = doc("c.md")
        others = [doc(f"{name}.md", title=name) for name in ("Beta", "Alpha", "Gamma")]
        nodes, links = convert_to_mind_map_data(
            [center, *others], [link(center, o) for o in others]
        )
        layout = calculate_mind_map_layout(nodes, links, "c.md", max_depth=1)

        left = [n.label for n in layout.nodes if n.side == "left"]
        right = [n.label for n in layout.nodes if n.side == "right"]
        assert left == ["Alpha", "Beta"]
        assert right == ["Gamma"]
        gamma = next(n for n in layout.nodes if n.label == "Gamma")
        assert gamma.y == 400

    def test_second_tier(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, "center.md", max_depth=2)
        far = _by_id(layout)["doc-far/away.md"]
        assert far.depth == 2
        assert far.side == "left"
        assert far.x == 0

    def test_external_cluster(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(
            nodes, links, "center.md", max_depth=1, show_external_links=True
        )
        by_id = _by_id(layout)

        center = by_id["doc-center.md"]
        assert center.y == 350
        github = by_id["ext-github.com"]
        assert github.side == "external"
        assert github.depth == 1
        # Lowest document is 45 below center, cluster gap 100
        assert github.y == 350 + 45 + 100
        # Row of one starts half a slot left of center, offset by half a node
        assert github.x == 600 - 80 + 70
        assert "ext-python.org" not in by_id

    def test_external_hidden_by_default(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, "center.md", max_depth=2)
        assert all(n.node_type == "document" for n in layout.nodes)
        assert layout.center_node.y == 400

    def test_links_filtered_to_placed_nodes(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, "center.md", max_depth=1)
        placed = {n.id for n in layout.nodes}
        assert len(layout.links) == 4
        assert all(
            link.source in placed and link.target in placed for link in layout.links
        )

    def test_bounds_include_padding(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, "center.md", max_depth=1)
        assert layout.bounds.min_x == 300 - 120 - 60
        assert layout.bounds.max_x == 900 + 120 + 60
        assert layout.bounds.min_y == 355 - 44 - 60
        assert layout.bounds.max_y == 445 + 44 + 60

    @pytest.mark.parametrize("center", ["/center.md", "//center.md"])
    def test_center_lookup_ignores_leading_slashes(self, hub_graph, center):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, center, max_depth=1)
        assert layout.center_node.id == "doc-center.md"

    def test_center_lookup_by_file_path(self, graph_parts):
        doc, _, _ = graph_parts
        node = doc("notes/today.md")
        nodes, links = convert_to_mind_map_data([node], [])
        nodes[0].id = "custom-id"
        layout = calculate_mind_map_layout(nodes, links, "/notes/today.md")
        assert layout.center_node.id == "custom-id"

    def test_missing_center_gives_empty_layout(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(
            nodes, links, "nope.md", canvas_width=1000, canvas_height=700
        )
        assert layout.nodes == []
        assert layout.links == []
        assert (layout.bounds.min_x, layout.bounds.max_x) == (0, 1000)
        assert (layout.bounds.min_y, layout.bounds.max_y) == (0, 700)

    def test_is_deterministic(self, hub_graph):
        nodes, links = hub_graph
        first = calculate_mind_map_layout(nodes, links, "center.md", max_depth=2)
        second = calculate_mind_map_layout(nodes, links, "center.md", max_depth=2)
        assert [(n.id, n.x, n.y) for n in first.nodes] == [
            (n.id, n.x, n.y) for n in second.nodes
        ]

    def test_inputs_are_not_mutated(self, hub_graph):
        nodes, links = hub_graph
        calculate_mind_map_layout(nodes, links, "center.md", max_depth=2)
        assert all(n.x == 0 and n.y == 0 for n in nodes)

    def test_negative_depth(self, hub_graph):
        nodes, links = hub_graph
        with pytest.raises(LayoutError):
            calculate_mind_map_layout(nodes, links, "center.md", max_depth=-1)


class TestSearch:
    def test_document_fields(self, hub_graph):
        nodes, _ = hub_graph
        alpha = next(n for n in nodes if n.id == "doc-alpha.md")
        assert node_matches_search(alpha, "")
        assert node_matches_search(alpha, "ALPHA")
        assert node_matches_search(alpha, "letter")
        assert node_matches_search(alpha, "alpha.md")
        assert not node_matches_search(alpha, "zeta")

    def test_external_fields(self, hub_graph):
        nodes, _ = hub_graph
        github = next(n for n in nodes if n.id == "ext-github.com")
        assert node_matches_search(github, "GitHub")
        assert node_matches_search(github, "org/repo")
        assert not node_matches_search(github, "python")


@pytest.fixture
def navigator(hub_graph):
    nodes, links = hub_graph
    layout = calculate_mind_map_layout(
        nodes, links, "center.md", max_depth=1, show_external_links=True
    )
    return MindMapNavigator(layout, viewport_width=1200, viewport_height=800)


class TestNavigator:
    def test_starts_centered(self, navigator):
        center = navigator.layout.center_node
        assert navigator.pan_x == 600 - center.x
        assert navigator.pan_y == 400 - center.y
        assert navigator.screen_to_canvas(600, 400) == (center.x, center.y)

    def test_screen_to_canvas_with_origin_and_zoom(self, navigator):
        navigator.pan_x, navigator.pan_y, navigator.zoom = 10, 20, 2
        assert navigator.screen_to_canvas(110, 220, origin_x=50, origin_y=100) == (25, 50)

    def test_hit_testing(self, navigator):
        alpha = navigator.layout.find("doc-alpha.md")
        assert navigator.find_node_at_point(alpha.x, alpha.y).id == alpha.id
        assert navigator.find_node_at_point(alpha.x + 119, alpha.y).id == alpha.id
        assert navigator.find_node_at_point(-1000, -1000) is None

    def test_open_icon_region(self, navigator):
        alpha = navigator.layout.find("doc-alpha.md")
        icon_x = alpha.x + alpha.width / 2 - 16 - 10
        icon_y = alpha.y - alpha.height / 2 + 10
        assert navigator.is_point_on_open_icon(alpha, icon_x + 8, icon_y + 8)
        assert not navigator.is_point_on_open_icon(alpha, alpha.x, alpha.y)

        github = navigator.layout.find("ext-github.com")
        assert not navigator.is_point_on_open_icon(github, github.x, github.y)

    def test_click_selects_and_double_click_recenters(self, navigator):
        beta = navigator.layout.find("doc-beta.md")

        first = navigator.handle_click(beta.x, beta.y, now_ms=1000)
        assert first.action == InteractionAction.SELECT
        assert navigator.selected_node_id == beta.id
        assert navigator.focused_node_id == beta.id

        second = navigator.handle_click(beta.x, beta.y, now_ms=1200)
        assert second.action == InteractionAction.RECENTER
        assert second.target == "beta.md"

    def test_slow_second_click_is_another_select(self, navigator):
        beta = navigator.layout.find("doc-beta.md")
        navigator.handle_click(beta.x, beta.y, now_ms=1000)
        result = navigator.handle_click(beta.x, beta.y, now_ms=1400)
        assert result.action == InteractionAction.SELECT

    def test_click_on_open_icon(self, navigator):
        alpha = navigator.layout.find("doc-alpha.md")
        x = alpha.x + alpha.width / 2 - 18
        y = alpha.y - alpha.height / 2 + 18
        result = navigator.handle_click(x, y, now_ms=0)
        assert result.action == InteractionAction.OPEN_FILE
        assert result.target == "alpha.md"
        assert navigator.selected_node_id is None

    def test_background_click_clears(self, navigator):
        beta = navigator.layout.find("doc-beta.md")
        navigator.handle_click(beta.x, beta.y, now_ms=0)
        result = navigator.handle_click(-5000, -5000, now_ms=10)
        assert result.action == InteractionAction.CLEAR
        assert navigator.selected_node_id is None
        assert navigator.focused_node_id is None

    def test_selection_flag_on_nodes(self, navigator):
        beta = navigator.layout.find("doc-beta.md")
        navigator.handle_click(beta.x, beta.y, now_ms=0)
        selected = [n.id for n in navigator.nodes if n.is_selected]
        assert selected == [beta.id]


class TestKeyboard:
    def test_first_arrow_focuses_center(self, navigator):
        result = navigator.handle_key("ArrowDown")
        assert result.action == InteractionAction.FOCUS
        assert navigator.focused_node_id == "doc-center.md"

    def test_other_keys_without_focus_do_nothing(self, navigator):
        assert navigator.handle_key("Enter").action == InteractionAction.NONE
        assert navigator.focused_node_id is None

    def test_vertical_moves_stay_in_column(self, navigator):
        navigator.focused_node_id = "doc-alpha.md"
        assert navigator.handle_key("ArrowDown").node.id == "doc-beta.md"
        assert navigator.handle_key("ArrowDown").action == InteractionAction.NONE
        assert navigator.handle_key("ArrowUp").node.id == "doc-alpha.md"

    def test_horizontal_moves_pick_nearest_row(self, navigator):
        navigator.focused_node_id = "doc-beta.md"
        assert navigator.handle_key("ArrowRight").node.id == "doc-gamma.md"
        assert navigator.handle_key("ArrowLeft").node.id == "doc-beta.md"

    def test_arrow_past_the_edge_keeps_focus(self, navigator):
        navigator.focused_node_id = "ext-github.com"
        result = navigator.handle_key("ArrowDown")
        assert result.action == InteractionAction.NONE
        assert navigator.focused_node_id == "ext-github.com"

    def test_enter_and_open(self, navigator):
        navigator.focused_node_id = "doc-gamma.md"
        enter = navigator.handle_key("Enter")
        assert enter.action == InteractionAction.RECENTER
        assert enter.target == "gamma.md"

        opened = navigator.handle_key("o")
        assert opened.action == InteractionAction.OPEN_FILE
        assert opened.target == "gamma.md"

    def test_enter_on_external_opens_url(self, navigator):
        navigator.focused_node_id = "ext-github.com"
        result = navigator.handle_key("Enter")
        assert result.action == InteractionAction.OPEN_URL
        assert result.target == "https://github.com/org/repo"

    def test_focus_change_pans_node_into_view(self, hub_graph):
        nodes, links = hub_graph
        layout = calculate_mind_map_layout(nodes, links, "center.md", max_depth=1)
        navigator = MindMapNavigator(layout, viewport_width=400, viewport_height=800)
        navigator.focused_node_id = "doc-center.md"

        target = navigator.handle_key("ArrowRight").node
        screen_x = target.x * navigator.zoom + navigator.pan_x
        assert screen_x == pytest.approx(400 - 100)


class TestZoom:
    def test_zoom_toward_pointer_keeps_point_fixed(self, navigator):
        before = navigator.screen_to_canvas(200, 300)
        navigator.zoom_at(200, 300, delta_y=-500)
        assert navigator.zoom == pytest.approx(1.5)
        after = navigator.screen_to_canvas(200, 300)
        assert after == pytest.approx(before)

    @pytest.mark.parametrize("delta_y,expected", [(100_000, 0.2), (-100_000, 3.0)])
    def test_zoom_is_clamped(self, navigator, delta_y, expected):
        navigator.zoom_at(0, 0, delta_y=delta_y)
        assert navigator.zoom == pytest.approx(expected)
