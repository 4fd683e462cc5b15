import sys
import argparse
from datetime import date

from wagonflow.config import CFG, logger
from wagonflow.core.events import EventType
from wagonflow.core.models import AnalysisConfig

def parse_date(raw):
    try: return date.fromisoformat(raw)
    except ValueError: raise argparse.ArgumentTypeError(f"Invalid date '{raw}' (expected YYYY-MM-DD)")

def build_parser():
    p = argparse.ArgumentParser(prog="wagonflow", description="Wagon movement analysis launcher.")
    sub = p.add_subparsers(dest="command")
    r = sub.add_parser("run", help="Run one analysis without the GUI.")
    src = r.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", help="Wagon data file.")
    src.add_argument("--sql", action="store_true", help="Acquire the data from the warehouse.")
    r.add_argument("--dest", default="", help="Destination directory (default from preferences).")
    r.add_argument("--from", dest="from_date", type=parse_date, default=date.min)
    r.add_argument("--to", dest="to_date", type=parse_date, default=date.max)
    r.add_argument("--volume-model", action="store_true")
    r.add_argument("--combine-intermodal-steel", action="store_true")
    return p

def config_from_args(args):
    cfg = AnalysisConfig(
        input_path=args.input,
        destination_dir=args.dest or CFG.get("default_directory"),
        from_date=args.from_date,
        to_date=args.to_date,
        produce_volume_model_output=args.volume_model,
        combine_intermodal_and_steel=args.combine_intermodal_steel,
    )
    cfg.set_use_sql_source(args.sql)
    return cfg

def print_event(event):
    if event.type == EventType.NOTIFICATION:
        print(f"{event.payload['title']}: {event.payload['msg']}")

def run_headless(args, engine_factory=None):
    from wagonflow.worker import Worker
    kwargs = {"engine_factory": engine_factory} if engine_factory else {}
    worker = Worker(callback=print_event, default_directory=CFG.get("default_directory"), **kwargs)
    result = worker.run_analysis(config_from_args(args))
    return 0 if result.ok else 1

def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.command == "run":
        return run_headless(args)
    from wagonflow.gui.app_qt import run
    try: run()
    except Exception:
        logger.exception("Fatal error in GUI")
        raise
    return 0

if __name__ == "__main__":
    sys.exit(main())
