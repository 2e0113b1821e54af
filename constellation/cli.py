"""CLI entry point for constellation."""

import argparse
import logging
import sys
from pathlib import Path

from constellation.app import Constellation
from constellation.config import load_config
from constellation.errors import CatalogueLoadError
from constellation.keys import KEY_BINDINGS
from constellation.output.base import RenderAdapter
from constellation.output.recorder import RecordingRenderer
from constellation.presentation import detail_url, parse_deep_link
from constellation.repository import CatalogueSummary, load_catalogue


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Constellation: live related-item graph")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--catalogue", default=None, help="Catalogue URL or path (overrides config)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sampling")
    sub = parser.add_subparsers(dest="command")

    # sample command
    sample_parser = sub.add_parser("sample", help="Pick an initial subgraph and print it")
    sample_parser.add_argument(
        "--pin", default=None,
        help="Deep-link id (e.g. 173 or '#173') to centre the first sample on",
    )

    # run command
    run_parser = sub.add_parser("run", help="Run a headless session with random clicks")
    run_parser.add_argument("--pin", default=None, help="Deep-link id to start from")
    run_parser.add_argument("--clicks", type=int, default=5, help="Number of random node clicks")
    run_parser.add_argument("--frames", type=int, default=120, help="Frames to run between clicks")
    run_parser.add_argument(
        "--snapshots", type=Path, default=None,
        help="Write PNG frames of the diagram to this directory",
    )
    run_parser.add_argument("--every", type=int, default=10, help="Snapshot every Nth redraw")

    # stats command
    sub.add_parser("stats", help="Show catalogue stats")

    # keys command
    sub.add_parser("keys", help="List keyboard shortcuts")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "keys":
        for key, action in KEY_BINDINGS.items():
            print(f"  {key:<10} {action}")
        return 0

    config = load_config(args.config)
    source = args.catalogue or config.catalogue.resolved_source

    try:
        catalogue = load_catalogue(source, timeout=config.catalogue.timeout)
    except CatalogueLoadError as e:
        logging.getLogger(__name__).error("%s", e)
        print("No data available.", file=sys.stderr)
        return 1

    if args.command == "stats":
        summary = CatalogueSummary(catalogue)
        print(summary)
        for name, count in summary.categories.most_common():
            print(f"  {name}: {count}")
        return 0

    renderer: RenderAdapter
    if args.command == "run" and args.snapshots is not None:
        from constellation.output.snapshot import SnapshotRenderer
        renderer = SnapshotRenderer(args.snapshots, every=args.every)
    else:
        renderer = RecordingRenderer()

    app = Constellation(catalogue, config, renderer, seed=args.seed)
    app.start(parse_deep_link(args.pin))

    if args.command == "sample":
        app.frame()
        _print_subgraph(app)
        return 0

    # run
    app.run(args.frames)
    _print_subgraph(app)
    for i in range(args.clicks):
        if not app.controller.current_nodes:
            print("Nothing to click.")
            break
        node = app.rng.choice(app.controller.current_nodes)
        print(f"\nClick {i + 1}: {node.id} {node.item.title!r} -> {detail_url(node.item)}")
        app.click(node)
        app.run(args.frames)
        _print_subgraph(app)

    if args.snapshots is not None:
        print(f"\nOutput: {args.snapshots}")
    return 0


def _print_subgraph(app: Constellation) -> None:
    nodes = app.controller.current_nodes
    edges = app.controller.edges
    print(
        f"{len(nodes)} nodes, {len(edges)} edges "
        f"(pinned={app.selection.pinned_id}, centre={app.selection.centre_id}, "
        f"alpha={app.layout.alpha:.4f})"
    )
    for n in nodes:
        artist = f" by {n.item.artist}" if n.item.artist else ""
        print(f"  [{n.id}] {n.item.title}{artist}")
    for e in edges:
        print(f"  {nodes[e.source].id} -- {nodes[e.target].id}")


if __name__ == "__main__":
    sys.exit(main())
