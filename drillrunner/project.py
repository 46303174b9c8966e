"""Generation of rust-project.json so rust-analyzer understands the exercises."""

from __future__ import annotations

import glob
import json
import os
import subprocess
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

PROJECT_FILE = "./rust-project.json"


@dataclass
class Crate:
    """One crate entry: a single exercise file treated as a binary."""

    root_module: str
    edition: str = "2021"
    deps: list[str] = field(default_factory=list)
    # Lets rust-analyzer work inside #[test] blocks.
    cfg: list[str] = field(default_factory=lambda: ["test"])


@dataclass
class RustAnalyzerProject:
    """Contents of rust-project.json."""

    sysroot_src: str = ""
    crates: list[Crate] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def write_to_disk(self) -> None:
        """Write rust-project.json into the current directory."""
        data = json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        Path(PROJECT_FILE).write_bytes(data.encode("utf-8"))

    def exercises_to_json(self) -> None:
        """Add a crate for every .rs file below ./exercises."""
        pattern = os.path.join(".", "exercises", "**", "*")
        for found in sorted(glob.glob(pattern, recursive=True, include_hidden=True)):
            path = Path(found)
            if path.suffix == ".rs":
                self.crates.append(Crate(root_module=found))

    def get_sysroot_src(self) -> None:
        """Find the standard library sources from RUST_SRC_PATH or rustc's sysroot."""
        path = os.environ.get("RUST_SRC_PATH")
        if path is not None:
            self.sysroot_src = path
            return

        result = subprocess.run(["rustc", "--print", "sysroot"], capture_output=True, check=False)
        output = (result.stdout or b"").decode("utf-8", errors="replace")
        words = output.split()
        toolchain = words[0] if words else output

        print(f"Determined toolchain: {toolchain}\n")

        self.sysroot_src = str(Path(toolchain, "lib", "rustlib", "src", "rust", "library"))