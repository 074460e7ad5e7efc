import datetime

import pytest

from trade_flow_history.utils import dates


def test_add_months_crosses_years():
    assert dates.add_months(datetime.date(2020, 11, 1), 3) == datetime.date(2021, 2, 1)
    assert dates.add_months(datetime.date(2020, 1, 1), -1) == datetime.date(2019, 12, 1)
    assert dates.add_months(datetime.date(2020, 1, 1), -24) == datetime.date(2018, 1, 1)


def test_add_months_out_of_range():
    with pytest.raises(OverflowError):
        dates.add_months(dates.MAX_SNAPSHOT_DATE, 1)
    with pytest.raises(OverflowError):
        dates.add_months(datetime.date(1, 1, 1), -1)


def test_month_range():
    months = list(dates.month_range(datetime.date(2019, 11, 1), datetime.date(2020, 2, 1)))
    assert months == [
        datetime.date(2019, 11, 1),
        datetime.date(2019, 12, 1),
        datetime.date(2020, 1, 1),
        datetime.date(2020, 2, 1),
    ]
    assert list(dates.month_range(datetime.date(2020, 2, 1), datetime.date(2020, 1, 1))) == []


def test_month_range_reaches_the_last_month():
    months = list(dates.month_range(datetime.date(9999, 10, 1), dates.MAX_SNAPSHOT_DATE))
    assert months[-1] == dates.MAX_SNAPSHOT_DATE
    assert len(months) == 3


def test_year_start_days_clamps():
    assert dates.year_start_days(0) == datetime.date.min.toordinal()
    assert dates.year_start_days(10000) == datetime.date.max.toordinal()
    assert dates.year_start_days(2000) == datetime.date(2000, 1, 1).toordinal()


def test_days_round_trip():
    day = datetime.date(1987, 6, 1)
    assert dates.from_days(dates.to_days(day)) == day
