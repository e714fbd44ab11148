from collections.abc import Iterator

from codegen_templates.models import LoadedTemplate, RegionMarker, RegionNode


def build_region_tree(template: LoadedTemplate) -> list[RegionNode]:
    """Rebuild region nesting from the template's flat begin/end markers.

    Returns the top-level regions in source order.
    """
    roots: list[RegionNode] = []
    open_regions: list[tuple[RegionMarker, list[RegionNode]]] = []

    for marker in template.region_markers:
        if marker.is_begin:
            open_regions.append((marker, []))
            continue

        assert open_regions, "End marker without a matching begin marker"
        begin_marker, children = open_regions.pop()
        assert begin_marker.region is not None
        node = RegionNode(
            region=begin_marker.region,
            range_begin=begin_marker.range_index,
            range_end=marker.range_index,
            replace_range_begin=begin_marker.replace_range_index,
            replace_range_end=marker.replace_range_index,
            children=children,
        )
        siblings = open_regions[-1][1] if open_regions else roots
        siblings.append(node)

    assert not open_regions, "Begin marker without a matching end marker"
    return roots


def iter_regions(nodes: list[RegionNode], depth: int = 0) -> Iterator[tuple[int, RegionNode]]:
    """Yield ``(depth, node)`` pairs depth first, in source order."""
    for node in nodes:
        yield depth, node
        yield from iter_regions(node.children, depth + 1)
