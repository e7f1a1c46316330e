import struct
from typing import Iterator, List, Optional, Tuple

from gridmaze.core.errors import MazeFormatError
from gridmaze.core.grid import Grid
from gridmaze.core.trace import Trace

MAGIC = b"MAZELOG"

# Event Types
EVT_VISIT = 0x02
EVT_CARVE = 0x03
EVT_PATH_ADD = 0x04
EVT_SOLVE = 0x06

# Payload layout per event type (after the type byte)
PAYLOADS = {
    EVT_VISIT: ">HH",
    EVT_CARVE: ">HHB",
    EVT_PATH_ADD: ">HH",
    EVT_SOLVE: ">HHHHB",
}


class EventWriter:
    """
    Append-only binary log of carves and solver traces, consumed by playback tools.
    Coordinates are packed as unsigned shorts, so grids are limited to 65535 per side.
    """
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def write_header(self, rows: int, cols: int):
        # Header: Magic "MAZELOG" + Rows (4b) + Cols (4b)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", rows, cols))

    def log_visit(self, row: int, col: int):
        # 1 byte type + 2b row + 2b col
        self.file.write(struct.pack(">BHH", EVT_VISIT, row, col))

    def log_carve(self, row: int, col: int, direction: int):
        # 1 byte type + 2b row + 2b col + 1b direction
        self.file.write(struct.pack(">BHHB", EVT_CARVE, row, col, direction))

    def log_path_add(self, row: int, col: int):
        self.file.write(struct.pack(">BHH", EVT_PATH_ADD, row, col))

    def write_trace(self, trace: Trace):
        """Writes a solve marker followed by the visited order and then the path."""
        name = trace.algorithm.encode("ascii")
        self.file.write(struct.pack(">BHHHHB", EVT_SOLVE, *trace.start, *trace.end, len(name)))
        self.file.write(name)
        for row, col in trace.visited:
            self.log_visit(row, col)
        for row, col in trace.path:
            self.log_path_add(row, col)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.rows = 0
        self.cols = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise MazeFormatError("Invalid event log file")
        data = self.file.read(8)
        if len(data) != 8:
            raise MazeFormatError("Truncated event log header")
        self.rows, self.cols = struct.unpack(">II", data)
        return self.rows, self.cols

    def _read(self, size: int) -> bytes:
        data = self.file.read(size)
        if len(data) != size:
            raise MazeFormatError("Truncated event record")
        return data

    def stream_events(self) -> Iterator[Tuple[int, Tuple]]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = ord(type_byte)
            fmt = PAYLOADS.get(type_code)
            if fmt is None:
                raise MazeFormatError(f"Unknown event type 0x{type_code:02x}")

            payload = struct.unpack(fmt, self._read(struct.calcsize(fmt)))
            if type_code == EVT_SOLVE:
                name = self._read(payload[4]).decode("ascii")
                payload = (payload[0:2], payload[2:4], name)
            yield (type_code, payload)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


def replay_carves(reader: EventReader) -> Grid:
    """Rebuilds a grid from the CARVE events of a generation log."""
    rows, cols = reader.read_header()
    grid = Grid(rows, cols)
    for type_code, data in reader.stream_events():
        if type_code == EVT_CARVE:
            row, col, direction = data
            if direction not in Grid.OPPOSITE:
                raise MazeFormatError(f"Invalid carve direction {direction}")
            neighbor = (row + Grid.DR[direction], col + Grid.DC[direction])
            grid.remove_wall_between((row, col), neighbor)
    return grid


def read_traces(reader: EventReader) -> List[Trace]:
    """Collects every trace written with EventWriter.write_trace, in file order."""
    reader.read_header()
    traces = []
    current: Optional[dict] = None

    def flush():
        if current is not None:
            traces.append(Trace(
                algorithm=current["algorithm"],
                start=current["start"],
                end=current["end"],
                visited=tuple(current["visited"]),
                path=tuple(current["path"]),
            ))

    for type_code, data in reader.stream_events():
        if type_code == EVT_SOLVE:
            flush()
            start, end, name = data
            current = {"algorithm": name, "start": start, "end": end, "visited": [], "path": []}
        elif current is None:
            continue
        elif type_code == EVT_VISIT:
            current["visited"].append(data)
        elif type_code == EVT_PATH_ADD:
            current["path"].append(data)
    flush()
    return traces
