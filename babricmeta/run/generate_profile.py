import argparse
import os

from babricmeta.common import ensure_output_dir, eprint
from babricmeta.database import MetaDatabase
from babricmeta.errors import MetaError
from babricmeta.model.babric import Side
from babricmeta.profile import ProfileSynthesizer, profile_file_name

PROFILES_DIR = "profiles"


def main():
    parser = argparse.ArgumentParser(description="Generate a launcher profile for a loader and game version")
    parser.add_argument("loader", help="loader version, e.g. 0.14.24-babric.1")
    parser.add_argument("game", help="game version, e.g. b1.7.3")
    parser.add_argument("--side", choices=[s.value for s in Side], default=Side.CLIENT.value)
    parser.add_argument("--zip", action="store_true", help="package the client profile as a zip")
    args = parser.parse_args()

    database = MetaDatabase()
    synthesizer = ProfileSynthesizer(database)
    try:
        database.regenerate()
        if args.zip:
            data = synthesizer.profile_zip(args.loader, args.game)
            file_name = profile_file_name(args.loader, args.game, "zip")
        else:
            data = synthesizer.profile_json(args.loader, args.game, args.side)
            file_name = profile_file_name(args.loader, args.game, "json")
    except MetaError as e:
        eprint("Failed to generate profile for loader %s on %s" % (args.loader, args.game))
        eprint("Error is %s" % e)
        raise SystemExit(1)
    finally:
        synthesizer.shutdown()

    path = os.path.join(ensure_output_dir(PROFILES_DIR), file_name)
    with open(path, "wb") as f:
        f.write(data)
    print(f"Wrote {path}")


if __name__ == "__main__":
    main()
