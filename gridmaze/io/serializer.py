import struct
import json
import zlib
from typing import Optional, Dict, Any, Tuple
from array import array

from gridmaze.core.complexity import MazePostProcessor
from gridmaze.core.errors import MazeFormatError
from gridmaze.core.grid import Grid
from gridmaze.core.maze import Maze


class MazeSerializer:
    MAGIC = b"MAZE"
    VERSION = 1

    # Flags
    FLAG_COMPRESSED = 1
    FLAG_SEED_ONLY = 2

    @staticmethod
    def save(grid: Grid, filepath: str, meta: Dict[str, Any] = None, seed_only=False, compress=False):
        """
        Saves the maze to a binary file.
        Format:
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - ROWS (4 bytes)
        - COLS (4 bytes)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes, 0 if seed_only)
        - DATA (compressed or raw), one wall byte per cell
        """
        if meta is None:
            meta = {}
        if seed_only and meta.get("seed") is None:
            raise MazeFormatError("seed_only requires meta['seed']")

        flags = 0
        if compress:
            flags |= MazeSerializer.FLAG_COMPRESSED
        if seed_only:
            flags |= MazeSerializer.FLAG_SEED_ONLY

        meta_bytes = json.dumps(meta).encode('utf-8')

        with open(filepath, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("<BB", MazeSerializer.VERSION, flags))
            f.write(struct.pack("<II", grid.rows, grid.cols))
            f.write(struct.pack("<H", len(meta_bytes)))
            f.write(meta_bytes)

            if seed_only:
                f.write(struct.pack("<I", 0)) # No data length
            else:
                # Wall bits only
                data = bytes(v & Grid.ALL_WALLS for v in grid.cells)
                if compress:
                    data = zlib.compress(data)

                f.write(struct.pack("<I", len(data)))
                f.write(data)

    @staticmethod
    def load(filepath: str) -> Tuple[Grid, Dict[str, Any]]:
        """Loads a grid and its metadata. Seed-only files are regenerated from meta."""
        with open(filepath, "rb") as f:
            blob = f.read()

        try:
            if blob[:4] != MazeSerializer.MAGIC:
                raise MazeFormatError("Invalid file format")
            version, flags = struct.unpack_from("<BB", blob, 4)
            if version != MazeSerializer.VERSION:
                raise MazeFormatError(f"Unsupported maze file version {version}")
            rows, cols = struct.unpack_from("<II", blob, 6)
            (meta_len,) = struct.unpack_from("<H", blob, 14)
            offset = 16
            meta = json.loads(blob[offset:offset + meta_len].decode('utf-8'))
            offset += meta_len
            (data_len,) = struct.unpack_from("<I", blob, offset)
            offset += 4
            data = blob[offset:offset + data_len]
        except (struct.error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MazeFormatError(f"Corrupt maze file: {e}") from e

        if rows == 0 or cols == 0:
            raise MazeFormatError(f"Invalid maze dimensions {rows}x{cols}")

        if flags & MazeSerializer.FLAG_SEED_ONLY:
            if meta.get("seed") is None:
                raise MazeFormatError("Seed-only file has no seed")
            from gridmaze.algo.generate import generate
            grid = generate(meta.get("algo", "DFS"), rows, cols, seed=meta["seed"])
            return grid, meta

        if flags & MazeSerializer.FLAG_COMPRESSED:
            try:
                data = zlib.decompress(data)
            except zlib.error as e:
                raise MazeFormatError(f"Corrupt maze data: {e}") from e

        return MazeSerializer.grid_from_bytes(rows, cols, data), meta

    @staticmethod
    def grid_from_bytes(rows: int, cols: int, data: bytes) -> Grid:
        if rows <= 0 or cols <= 0:
            raise MazeFormatError(f"Invalid maze dimensions {rows}x{cols}")
        if len(data) != rows * cols:
            raise MazeFormatError(f"Expected {rows * cols} cells, got {len(data)}")
        grid = Grid(rows, cols)
        # Replace cells completely
        grid.cells = array('B', (v & Grid.ALL_WALLS for v in data))
        if not MazePostProcessor.walls_symmetric(grid):
            raise MazeFormatError("Wall layout is not symmetric")
        return grid

    # JSON maze records, as exchanged with save/list collaborators

    @staticmethod
    def grid_to_walls(grid: Grid):
        return [[list(grid.walls((r, c))) for c in range(grid.cols)] for r in range(grid.rows)]

    @staticmethod
    def grid_from_walls(walls) -> Grid:
        if not walls or not walls[0]:
            raise MazeFormatError("Empty wall layout")
        rows, cols = len(walls), len(walls[0])
        data = bytearray()
        for row in walls:
            if len(row) != cols:
                raise MazeFormatError("Ragged wall layout")
            for flags in row:
                if len(flags) != 4:
                    raise MazeFormatError("Each cell needs four wall flags")
                data.append(sum(d for d, present in zip(Grid.DIRECTIONS, flags) if present))
        return MazeSerializer.grid_from_bytes(rows, cols, bytes(data))

    @staticmethod
    def to_dict(maze: Maze) -> Dict[str, Any]:
        return {
            "id": maze.id,
            "name": maze.name,
            "rows": maze.rows,
            "cols": maze.cols,
            "algorithm": maze.algorithm,
            "effective_algorithm": maze.effective_algorithm,
            "seed": maze.seed,
            "created_at": maze.created_at,
            "walls": MazeSerializer.grid_to_walls(maze.grid),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Maze:
        try:
            grid = MazeSerializer.grid_from_walls(data["walls"])
            if (grid.rows, grid.cols) != (data.get("rows", grid.rows), data.get("cols", grid.cols)):
                raise MazeFormatError("Declared dimensions do not match wall layout")
            algorithm = data.get("algorithm", "DFS")
            kwargs = {k: data[k] for k in ("id", "created_at") if data.get(k)}
            return Maze(
                grid=grid,
                algorithm=algorithm,
                effective_algorithm=data.get("effective_algorithm", algorithm),
                seed=data.get("seed"),
                name=data.get("name", ""),
                **kwargs,
            )
        except (KeyError, TypeError) as e:
            raise MazeFormatError(f"Invalid maze record: {e}") from e

    @staticmethod
    def save_json(maze: Maze, filepath: str, indent: Optional[int] = None):
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(MazeSerializer.to_dict(maze), f, indent=indent)

    @staticmethod
    def load_json(filepath: str) -> Maze:
        with open(filepath, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise MazeFormatError(f"Corrupt maze JSON: {e}") from e
        return MazeSerializer.from_dict(data)
