"""
pattern_evolution/archive.py - Frame, genome and run-log persistence
"""
import json
import logging
import os
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from .driver import FrameOutput
from .genome import Genome

logger = logging.getLogger(__name__)


class FrameArchive:
    """Writes finished frames as PNG and snapshots the genome after each mutation"""

    def __init__(self, base_path: str):
        self.base_path = base_path
        self.run_log: List[Dict[str, Any]] = []

        self.dirs = {
            'frames': os.path.join(base_path, 'frames'),
            'genomes': os.path.join(base_path, 'genomes'),
            'logs': os.path.join(base_path, 'logs'),
        }
        for dir_path in self.dirs.values():
            os.makedirs(dir_path, exist_ok=True)

    def write_seed(self, seed: int) -> str:
        path = os.path.join(self.base_path, 'last_seed.txt')
        with open(path, 'w') as f:
            f.write(f"{seed}\n")
        return path

    def save_frame(self, frame: FrameOutput) -> str:
        path = os.path.join(self.dirs['frames'], f"frame_{frame.t:06d}.png")
        frame.to_image().save(path)
        return path

    def save_genome(self, genome: Genome, t: int) -> str:
        path = os.path.join(self.dirs['genomes'], f"genome_{t:06d}.json")
        genome.to_json(path)
        return path

    def record(self, frame: FrameOutput, genome: Genome) -> None:
        """Persist one completed cycle and append it to the run log"""
        timestamp = time.time()
        entry = {
            't': frame.t,
            'slot': frame.slot,
            'timestamp': timestamp,
            'datetime': datetime.fromtimestamp(timestamp).isoformat(),
            'frame': os.path.basename(self.save_frame(frame)),
            'stats': vars(frame.stats).copy(),
            'transform': frame.transform.to_dict(),
            'mutated': list(frame.mutated),
        }
        if frame.mutated:
            entry['genome'] = os.path.basename(self.save_genome(genome, frame.t))

        self.run_log.append(entry)
        log_file = os.path.join(self.dirs['logs'], 'run_log.json')
        with open(log_file, 'w') as f:
            json.dump(self.run_log, f, indent=2)

    def list_frames(self) -> List[str]:
        frames_dir = self.dirs['frames']
        return sorted(
            os.path.join(frames_dir, name) for name in os.listdir(frames_dir) if name.endswith('.png')
        )

    def load_genome(self, filename: str) -> Optional[Genome]:
        """Load a specific archived genome"""
        if not os.path.isabs(filename):
            filename = os.path.join(self.dirs['genomes'], filename)
        if not os.path.exists(filename):
            logger.warning("No archived genome at %s", filename)
            return None
        return Genome.from_json(filename=filename)
