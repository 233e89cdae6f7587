import sys

from scrolltime.clock import clock


class Log:
    def __init__(self, stream=None):
        self.stream = stream
        self.in_ticker = False

    @property
    def out(self):
        return self.stream if self.stream is not None else sys.stdout

    @staticmethod
    def timestamp():
        return clock.local_now().strftime('%Y/%m/%d %H:%M:%S')

    def print(self, *args, **kwargs):
        if self.in_ticker:
            print(file=self.out)
            self.in_ticker = False

        print(f'[{self.timestamp()}]', *args, **kwargs, file=self.out)

    def print_ticker(self, *args):
        # Rewrites the current line; the next print() moves past it.
        print(f'\r[{self.timestamp()}]', *args, end='\x1b[K', file=self.out, flush=True)
        self.in_ticker = True


log = Log()
