import os
import sys


class Logger:
    """Tees output to a stream and, if a log dir is given, a log file, flushing after every write."""

    def __init__(self, log_dir: str | None, label: str, mode: str, stream=None):
        self.stream = stream if stream is not None else sys.stdout
        self.path = None
        self.f = None
        if log_dir is not None:
            os.makedirs(log_dir, exist_ok=True)
            safe = label.replace(" ", "_").replace("/", "_")
            self.path = os.path.join(log_dir, f"{safe}_{mode}.log")
            self.f = open(self.path, "w")

    def log(self, msg: str = ""):
        print(msg, file=self.stream, flush=True)
        if self.f is not None:
            self.f.write(msg + "\n")
            self.f.flush()

    def close(self):
        if self.f is not None:
            self.f.close()
            self.f = None
