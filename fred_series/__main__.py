from fred_series.data.fred_fetcher import main

main()
