import time


class Timer:
    def __init__(self):
        self.start_time = time.perf_counter()

    def stop(self) -> float:
        """ returns in milliseconds """
        return (time.perf_counter() - self.start_time) * 1000
