"""Load an ARFF dataset, print its selection summary and the first rows."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from arffset.data import DatasetBuilder
from arffset.errors import ArffError
from arffset.utils import ConfigError, load_config, set_seed


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load an ARFF file and show the selected features/labels.")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file.")
    parser.add_argument("--source", type=str, default=None, help="ARFF file path or URL (.gz supported).")
    parser.add_argument("--class-index", type=int, default=None, help="0-based index of the class column.")
    parser.add_argument("--class-column", type=str, action="append", default=None, help="Name of a class column.")
    parser.add_argument("--class-is-last", action="store_true", help="Use the last column as class.")
    parser.add_argument("--ignore", type=str, action="append", default=None, help="Column name to ignore.")
    parser.add_argument("--date-as-numeric", action="store_true", help="Treat DATE columns as numeric.")
    parser.add_argument("--string-as-nominal", action="store_true", help="Treat STRING columns as nominal.")
    parser.add_argument("--max-rows", type=int, default=10, help="Number of rows to print.")
    parser.add_argument("--export-schema", type=str, default=None, help="Write the schema record as JSON.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    return parser.parse_args()


def builder_from_args(args: argparse.Namespace) -> DatasetBuilder:
    if args.config:
        config = load_config(args.config)
        seed = (config.get("sampling") or {}).get("seed")
        if seed is not None:
            set_seed(int(seed))
        return DatasetBuilder.from_config(config)

    if not args.source:
        raise SystemExit("Either --config or --source is required.")

    builder = DatasetBuilder().set_source(args.source)
    if args.date_as_numeric:
        builder.date_as_numeric()
    if args.string_as_nominal:
        builder.string_as_nominal()
    if args.ignore:
        builder.ignore_column(*args.ignore)
    if args.class_column:
        builder.class_column(*args.class_column)
    elif args.class_index is not None:
        builder.class_index(args.class_index)
    elif args.class_is_last:
        builder.class_is_last()
    return builder.add_all_features()


def format_row(values: List[Optional[str]]) -> str:
    return ",".join("?" if value is None else value for value in values)


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        builder = builder_from_args(args)
        dataset = builder.build().prepare()
    except (ConfigError, ArffError, OSError) as exc:
        raise SystemExit(str(exc)) from exc

    print(dataset.to_info())
    print("Data")
    columns = [f.name for f in dataset.features] + [f.name for f in dataset.labels]
    for index in range(min(args.max_rows, len(dataset))):
        print(format_row([dataset.cell(index, name) for name in columns]))

    if args.export_schema:
        path = builder.save_schema(args.export_schema)
        print(f"Schema written to {path}")


if __name__ == "__main__":
    main()
