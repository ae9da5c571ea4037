# Shared sample sources for the language and façade tests.
# Line numbers quoted in the tests are 1-based, as an editor shows them.

from __future__ import annotations

# 20 lines: compute spans 3-10, Helper 13-18 with run 14-15 and name 17-18.
PYTHON_SAMPLE = b"""import os

def compute(values):
    total = 0
    for v in values:
        total += v
    if total > 10:
        return total
    total -= 1
    return total


class Helper:
    def run(self):
        return compute([1, 2, 3])

    def name(self):
        return os.path.basename(__file__)

print(Helper().run())
"""

RUST_SAMPLE = b"""struct Point {
    x: i32,
}

impl Point {
    fn new(x: i32) -> Self {
        Point { x }
    }

    fn x(&self) -> i32 {
        self.x
    }
}

fn main() {
    let p = Point::new(1);
}
"""

JAVASCRIPT_SAMPLE = b"""export class Counter {
  constructor() {
    this.count = 0;
  }

  increment() {
    this.count += 1;
    return this.count;
  }
}

function helper(a, b) {
  return a + b;
}
"""

GO_SAMPLE = b"""package main

type Point struct {
\tX int
}

func (p Point) Norm() int {
\treturn p.X
}

func main() {
}
"""

JAVA_SAMPLE = b"""public class Greeter {
    private final String name;

    public Greeter(String name) {
        this.name = name;
    }

    public String greet() {
        return "Hello " + name;
    }
}
"""

# The last function holds a byte sequence that is not valid UTF-8.
INVALID_UTF8_SAMPLE = b"def ok():\n    return 1\n\ndef bad():\n    return '\xff'\n"


def big_python_function(body_lines: int = 150) -> bytes:
    """A single function whose body is `body_lines` assignments (x0 on line 2)."""
    body = "".join(f"    x{i} = {i}\n" for i in range(body_lines))
    return f"def big():\n{body}".encode("utf-8")


def python_source_of_size(size: int) -> bytes:
    """Valid Python of exactly `size` bytes (size >= 2)."""
    line = b"x = 1\n"
    count, rest = divmod(size - 2, len(line))
    return line * count + b"#" * rest + b"#\n"


__all__ = [
    "PYTHON_SAMPLE",
    "RUST_SAMPLE",
    "JAVASCRIPT_SAMPLE",
    "GO_SAMPLE",
    "JAVA_SAMPLE",
    "INVALID_UTF8_SAMPLE",
    "big_python_function",
    "python_source_of_size",
]
