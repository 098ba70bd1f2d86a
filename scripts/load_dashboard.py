# Script that loads one or more years of client records and prints a summary
from argparse import ArgumentParser
from pathlib import Path
import logging

from property_dashboard.pipeline import DashboardPipeline
from property_dashboard.records.search import records_to_frame
from property_dashboard.settings import settings
from property_dashboard.utils.errors import FetchError


def parse_args(argv=None):
    parser = ArgumentParser(description='Load yearly client CSVs, geocode them and print analytics.')
    parser.add_argument('--years', '-y', nargs='+', default=['all'])
    parser.add_argument('--data-dir', '-d', type=Path, default=None)
    parser.add_argument('--data-url', '-u', type=str, default=None)
    parser.add_argument('--refresh', '-r', action='store_true')
    parser.add_argument('--clear-cache', '-c', action='store_true')
    parser.add_argument('--search', '-s', type=str, default=None)
    parser.add_argument('--progress', '-p', action='store_true')
    parser.add_argument('--log-level', '-l', type=str, default='INFO')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    overrides = {'show_progress': args.progress}
    if args.data_dir is not None:
        overrides['data_dir'] = args.data_dir
    if args.data_url is not None:
        overrides['data_url'] = args.data_url
    config = settings.model_copy(update=overrides)

    pipeline = DashboardPipeline.from_settings(config)
    try:
        if args.clear_cache:
            pipeline.reset()

        years = args.years if args.years != ['all'] else config.years
        if len(years) == 1:
            try:
                if args.refresh:
                    pipeline.refresh(years[0])
                else:
                    pipeline.load_year(years[0])
            except FetchError as e:
                print(f'Failed to load data for {e.year}: {e.cause}')
                return 1
        else:
            result = pipeline.load_all(years)
            for year in result.years:
                status = f'FAILED ({result.failures[year]})' if year in result.failures else f'{len(result.by_year[year])} records'
                print(f'{year}: {status}')

        analytics = pipeline.summarize()
        print(f'Clients: {analytics.total_clients}  Properties: {analytics.total_properties}  '
              f'Interstate: {analytics.interstate_sales}  Top region: {analytics.top_region}')
        for insight in analytics.insights:
            print(f'[{insight.type}] {insight.title}: {insight.message}')

        if args.search:
            matches = pipeline.search(args.search)
            print(records_to_frame(matches).to_string(index=False))
    finally:
        pipeline.close()

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
