from datetime import date

FY_START_MONTH = 7


def last_completed_financial_year(today: date):
    """
    Return (start, end) of the most recent fully elapsed Australian financial
    year. The range is half-open: start is 1 July, end is the following 1 July.
    """
    if today.month > 6:
        start_year = today.year - 1
    else:
        start_year = today.year - 2
    return date(start_year, FY_START_MONTH, 1), date(start_year + 1, FY_START_MONTH, 1)
