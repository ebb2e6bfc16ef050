"""Run the chart-repo command line tool with `python -m chart_repo`."""

from chart_repo.tool.chart_repo import main

main()
