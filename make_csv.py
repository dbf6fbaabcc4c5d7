#!/usr/bin/env python3
import random, sys
from pathlib import Path

# Usage: python make_csv.py out.csv rows num_cols str_cols ragged_rate seed [delimiter]
# Example: python make_csv.py /tmp/mixed.csv 100_000 4 2 0.01 1337
#
# Numeric columns hold integers and 2-place decimals drawn from a small
# range so values repeat; string columns draw from a short word list.
# A ragged row drops or adds one trailing field.

WORDS = ["alpha", "beta", "gamma", "delta", "omega", "sigma", "kappa", "zeta"]


def write_table(path, rows: int, nnum: int, nstr: int, ragged_rate: float = 0.0,
                seed: int = 1337, delimiter: str = ",") -> Path:
    random.seed(seed)
    p = Path(path)
    rr = random.random
    ri = random.randint
    choice = random.choice
    with p.open("w", newline="") as f:
        header = [f"n{i}" for i in range(nnum)] + [f"s{j}" for j in range(nstr)]
        f.write(delimiter.join(header) + "\n")
        for _ in range(rows):
            row = []
            for _ in range(nnum):
                if rr() < 0.5:
                    row.append(str(ri(-500, 500)))
                else:
                    row.append(f"{ri(-50000, 50000) / 100:.2f}")
            for _ in range(nstr):
                row.append(choice(WORDS))
            if rr() < ragged_rate:
                if rr() < 0.5 and len(row) > 1:
                    row.pop()
                else:
                    row.append(choice(WORDS))
            f.write(delimiter.join(row) + "\n")
    return p


def main():
    if len(sys.argv) not in (7, 8):
        print("Usage: python make_csv.py out.csv rows num_cols str_cols ragged_rate seed [delimiter]", file=sys.stderr)
        sys.exit(2)
    out, rows, nnum, nstr, ragged_rate, seed = (
        sys.argv[1], int(sys.argv[2].replace('_','')), int(sys.argv[3]),
        int(sys.argv[4]), float(sys.argv[5]), int(sys.argv[6])
    )
    delimiter = sys.argv[7] if len(sys.argv) == 8 else ","
    write_table(out, rows, nnum, nstr, ragged_rate, seed, delimiter)

if __name__ == "__main__":
    main()
