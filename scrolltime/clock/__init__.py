from datetime import datetime, timedelta, timezone


class Clock:
    '''
    Wall-clock source for everything that needs to know "now".

    Always returns timezone-aware datetimes in UTC; localize them with
    `local_now()` or `today()` when a calendar date is needed. Tests swap in a
    subclass (or any object with the same methods) to control time.
    '''

    def now(self):
        return datetime.now(tz=timezone.utc)

    def local_now(self, tz=None):
        if tz is None:
            return self.now().astimezone()

        return self.now().astimezone(tz)

    def today(self, tz=None):
        return self.local_now(tz).date()

    def next_midnight(self, tz=None):
        lnow = self.local_now(tz)
        midnight = datetime(lnow.year, lnow.month, lnow.day, tzinfo=lnow.tzinfo)

        return midnight + timedelta(days=1)


clock = Clock()
