#!/usr/bin/env python3
"""
Bluebikes Station Traffic Map - Unified CLI
============================================
Interactive map of bike-share station traffic, filterable by time of day.

Usage:
    python main.py generate [--all | --interactive | --snapshot] [options]
    python main.py info     # Show dataset info
    python main.py serve    # Serve the outputs directory locally

Examples:
    python main.py generate --all
    python main.py generate --interactive --step 5
    python main.py generate --snapshot --time 8:00 --zoom 13
"""

import argparse
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(message)s'
)
logger = logging.getLogger(__name__)


def print_header(title: str) -> None:
    """Print a styled header."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def cmd_generate(args) -> None:
    """Generate map files."""
    from bikeflow.data.feed_loader import FeedLoader
    from bikeflow.generators import TrafficMapGenerator, SnapshotGenerator
    from bikeflow.render.projector import Viewport
    from bikeflow.core.time_filter import parse_time_of_day
    from bikeflow.config import DEFAULT_MAP_CENTER, OUTPUT_DIR

    if not (args.all or args.interactive or args.snapshot):
        print("No generators selected. Use --all or specify individual generators.")
        print("  --all           Generate all outputs")
        print("  --interactive   Generate interactive traffic map")
        print("  --snapshot      Generate static SVG snapshot")
        return

    try:
        time_filter = parse_time_of_day(args.time)
    except ValueError as e:
        print(f"Invalid --time: {e}")
        return

    print_header("Bluebikes Traffic Map Generator")

    # Shared data for all generators
    print("\n📦 Loading station and trip feeds...")
    data = FeedLoader(data_dir=args.data_dir).load()
    if not data.loaded:
        print("  ⚠️  Feeds unavailable, maps will be empty")

    generators = []

    if args.all or args.interactive:
        generators.append(('Traffic Map', TrafficMapGenerator(data, step=args.step)))
    if args.all or args.snapshot:
        viewport = Viewport(
            center_lon=DEFAULT_MAP_CENTER[1],
            center_lat=DEFAULT_MAP_CENTER[0],
            zoom=args.zoom,
            width=args.width,
            height=args.height,
        )
        generators.append(('Snapshot', SnapshotGenerator(data, viewport=viewport, time_filter=time_filter)))

    # Ensure output directory exists
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    for name, generator in generators:
        print(f"\n🔧 Generating {name}...")
        output_path = generator.save()
        file_size = output_path.stat().st_size / (1024 * 1024)
        print(f"   ✅ Saved: {output_path.name} ({file_size:.2f} MB)")

    print_header("COMPLETE!")
    print(f"\nOutput files saved to: {OUTPUT_DIR}")


def cmd_info(args) -> None:
    """Show dataset information."""
    from bikeflow.data.feed_loader import FeedLoader
    from bikeflow.core.traffic import busiest_stations, compute_station_traffic

    print_header("Bluebikes Dataset Info")

    loader = FeedLoader(data_dir=args.data_dir)
    print(f"\n📁 Data directory: {loader.data_dir}")

    data = loader.load()
    if not data.loaded:
        print("\n  ⚠️  Feeds unavailable")
        return

    print("\n📊 Table sizes:")
    print(f"   Stations:   {len(data.stations):,} rows")
    print(f"   Trips:      {len(data.trips):,} rows")

    date_range = data.trips.date_range()
    if date_range:
        first, last = date_range
        print(f"   Period:     {first:%Y-%m-%d} to {last:%Y-%m-%d}")

    traffic = compute_station_traffic(data.stations, data.trips.trips)
    print("\n🚲 Busiest stations:")
    for row in busiest_stations(traffic, limit=args.top).itertuples(index=False):
        print(f"   {row.short_name:>8}  {int(row.total_traffic):>7,} trips  {row.name}")


def cmd_serve(args) -> None:
    """Serve the outputs directory locally."""
    import functools
    import http.server
    import socketserver
    import webbrowser
    from bikeflow.config import OUTPUT_DIR

    PORT = args.port

    Handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(OUTPUT_DIR))

    # Allow address reuse
    socketserver.TCPServer.allow_reuse_address = True

    with socketserver.TCPServer(("127.0.0.1", PORT), Handler) as httpd:
        url = f"http://127.0.0.1:{PORT}/traffic_map.html"
        print_header("Starting Local Server")
        print(f"  🚀 Server running at: {url}")
        print(f"  📂 Serving directory: {OUTPUT_DIR}")
        print("  ⌨️  Press Ctrl+C to stop")

        # Try to open browser
        try:
            webbrowser.open(url)
        except webbrowser.Error:
            logger.warning("Could not open a browser")

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\n  🛑 Server stopped.")


def build_parser() -> argparse.ArgumentParser:
    from bikeflow.config import DEFAULT_VIEWPORT_SIZE, DEFAULT_ZOOM, SLIDER_STEP

    parser = argparse.ArgumentParser(
        description='Bluebikes Traffic Map - Generate station traffic maps',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Generate command
    gen_parser = subparsers.add_parser('generate', help='Generate map files')
    gen_parser.add_argument('--all', action='store_true', help='Generate all outputs')
    gen_parser.add_argument('--interactive', action='store_true', help='Generate interactive traffic map')
    gen_parser.add_argument('--snapshot', action='store_true', help='Generate static SVG snapshot')
    gen_parser.add_argument('--time', default='any', help="Snapshot time filter: 'any', minutes, or HH:MM (default: any)")
    gen_parser.add_argument('--zoom', type=float, default=DEFAULT_ZOOM, help=f'Snapshot zoom (default: {DEFAULT_ZOOM})')
    gen_parser.add_argument('--width', type=int, default=DEFAULT_VIEWPORT_SIZE[0], help='Snapshot width in pixels')
    gen_parser.add_argument('--height', type=int, default=DEFAULT_VIEWPORT_SIZE[1], help='Snapshot height in pixels')
    gen_parser.add_argument('--step', type=int, default=SLIDER_STEP, help=f'Slider resolution in minutes (default: {SLIDER_STEP})')
    gen_parser.add_argument('--data-dir', default=None, help='Directory with local copies of the feeds')
    gen_parser.set_defaults(func=cmd_generate)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show dataset information')
    info_parser.add_argument('--top', type=int, default=10, help='Number of busiest stations to list')
    info_parser.add_argument('--data-dir', default=None, help='Directory with local copies of the feeds')
    info_parser.set_defaults(func=cmd_info)

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Serve the outputs directory locally')
    serve_parser.add_argument('--port', type=int, default=8000, help='Port to serve on (default: 8000)')
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    args.func(args)


if __name__ == '__main__':
    main()
