#!/usr/bin/env python3
"""
Sample data generator for the datalog tools.

Generates synthetic vehicle CSV logs with a two-row header:
- A clean drive log (speed, rpm, throttle, coolant temperature)
- A noisy log with short rows and non-numeric fields
- Optionally a large log for performance testing
"""

import argparse
from pathlib import Path

import numpy as np
import pandas as pd


def generate_noise(size: int, scale: float = 0.1) -> np.ndarray:
    """Generate random noise."""
    return np.random.normal(0, scale, size)


def write_log(output_path: Path, df: pd.DataFrame, units: list[str]):
    """Write a dataframe as a CSV log with a name row and a unit row."""
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(",".join(df.columns) + "\n")
        f.write(",".join(units) + "\n")
        df.to_csv(f, index=False, header=False, float_format="%.4f")
    print(f"Generated: {output_path} ({len(df)} rows, {len(df.columns) - 1} channels)")


def generate_drive_log(output_path: Path, num_points: int = 6000, rate: float = 50.0):
    """
    Generate a clean drive log sampled at a fixed rate.

    Contains: time, speed, rpm, throttle, coolant channels.
    """
    time = np.arange(num_points) / rate

    speed = np.clip(60 + 30 * np.sin(2 * np.pi * 0.01 * time) + generate_noise(num_points, 0.5), 0, None)
    rpm = 800 + speed * 35 + generate_noise(num_points, 20)
    throttle = np.clip(20 + 15 * np.sin(2 * np.pi * 0.02 * time + 0.4) + generate_noise(num_points, 1.0), 0, 100)
    coolant = 70 + 20 * (1 - np.exp(-time / 60)) + generate_noise(num_points, 0.2)

    df = pd.DataFrame({
        "time": time,
        "speed": speed,
        "rpm": rpm,
        "throttle": throttle,
        "coolant": coolant,
    })
    write_log(output_path, df, ["s", "mph", "rpm", "%", "degC"])


def generate_noisy_log(output_path: Path, num_points: int = 500):
    """
    Generate a log with the defects real loggers produce.

    Some rows are cut short and some values are "N/A".
    """
    time = np.arange(num_points) / 10.0
    speed = 40 + 5 * np.sin(time)
    rpm = 2000 + 300 * np.cos(time)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write("time,speed,rpm\n")
        f.write("s,mph,rpm\n")
        for i in range(num_points):
            if i % 17 == 0:
                f.write(f"{time[i]:.3f},{speed[i]:.3f}\n")  # Dropped rpm value
            elif i % 23 == 0:
                f.write(f"{time[i]:.3f},N/A,{rpm[i]:.1f}\n")
            else:
                f.write(f"{time[i]:.3f},{speed[i]:.3f},{rpm[i]:.1f}\n")
    print(f"Generated: {output_path} ({num_points} rows, 2 channels)")


def generate_large_log(output_path: Path, num_points: int = 500000):
    """
    Generate a large log for performance testing.
    """
    print(f"Generating large log with {num_points} rows...")

    time = np.linspace(0, 1000, num_points)
    data = {"time": time}
    units = ["s"]

    for i in range(10):
        freq = 0.01 + i * 0.005
        data[f"wheel_speed_{i + 1}"] = 50 + (10 + i) * np.sin(2 * np.pi * freq * time) + generate_noise(num_points, 0.5)
        units.append("km/h")

    for i in range(5):
        data[f"brake_pressure_{i + 1}"] = 1.0 + 0.3 * np.sin(2 * np.pi * 0.02 * (i + 1) * time) + generate_noise(num_points, 0.02)
        units.append("bar")

    write_log(output_path, pd.DataFrame(data), units)


def main():
    parser = argparse.ArgumentParser(description="Generate sample CSV logs")
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=Path("sample_data"),
        help="Output directory for generated files"
    )
    parser.add_argument(
        "--large",
        action="store_true",
        help="Also generate a large log for performance testing"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()

    if args.seed is not None:
        np.random.seed(args.seed)

    args.output_dir.mkdir(parents=True, exist_ok=True)

    generate_drive_log(args.output_dir / "drive_log.csv")
    generate_noisy_log(args.output_dir / "noisy_log.csv")

    if args.large:
        generate_large_log(args.output_dir / "large_log.csv")

    print(f"\nAll files generated in: {args.output_dir.absolute()}")
    print("\nTry:")
    print(f"  datalog-info {args.output_dir / 'drive_log.csv'} --frequency")
    print(f"  datalog-viewer {args.output_dir / 'noisy_log.csv'}")


if __name__ == "__main__":
    main()
