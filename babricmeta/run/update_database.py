import argparse
import os

from babricmeta.common import ensure_output_dir, eprint, refresh_interval, write_json
from babricmeta.database import MetaDatabase, VersionAggregator, VersionSnapshot
from babricmeta.errors import AggregationError

VERSIONS_DIR = "versions"


def dump(versions):
    return [v.to_dict() for v in versions]


def write_snapshot(snapshot: VersionSnapshot):
    out_dir = ensure_output_dir(VERSIONS_DIR)

    components = {
        "game": dump(snapshot.game),
        "mappings": dump(snapshot.mappings),
        "intermediary": dump(snapshot.intermediary),
        "loader": dump(snapshot.get_loader()),
        "installer": dump(snapshot.installer),
    }
    for component, versions in components.items():
        write_json(os.path.join(out_dir, f"{component}.json"), versions)
    write_json(os.path.join(out_dir, "versions.json"), components)
    print(f"Wrote {len(snapshot.game)} game versions to {out_dir}")


def main():
    parser = argparse.ArgumentParser(description="Generate the Babric version database")
    parser.add_argument("--watch", action="store_true",
                        help="keep regenerating every META_REFRESH_INTERVAL seconds")
    args = parser.parse_args()

    database = MetaDatabase(VersionAggregator())
    try:
        write_snapshot(database.regenerate())
    except AggregationError as e:
        eprint("Failed to generate version database")
        eprint("Error is %s" % e)
        if not args.watch:
            raise SystemExit(1)

    if args.watch:
        database.start(refresh_interval(), on_update=write_snapshot)
        try:
            database.wait()
        except KeyboardInterrupt:
            database.stop()


if __name__ == "__main__":
    main()
