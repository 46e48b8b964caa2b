# gekkotools

Building blocks for working with GameCube software.

- `gekkotools.address`: `Address` is a 32-bit memory address. Adding or subtracting an integer wraps around at 32 bits. `is_aligned` checks alignment. An address compares equal to a plain `int` with the same value, and it prints as `0x8000_3100`.
- `gekkotools.primitive`: the `Primitive` enum has the members `U8`, `U16`, `U32`, `I8`, `I16` and `I32`. Each member reads and writes its integer type from a byte buffer in native byte order (`read_ne_bytes` / `write_ne_bytes`), little endian (`read_le_bytes` / `write_le_bytes`) or big endian (`read_be_bytes` / `write_be_bytes`).
  - A short buffer is padded with zeros when read.
  - When writing, bytes that do not fit in the buffer are dropped.
- `gekkotools.dol`: reads and writes `.dol` executables.
  - `Header` holds 7 text and 11 data section slots, plus the bss target and size and the entry point.
  - `Dol` is a header padded to 0x100 bytes, followed by the body.
  - `text_sections()` and `data_sections()` yield the sections that are present: `SectionInfo` from a `Header`, `Section` with its contents from a `Dol`.
  - A truncated header, or a section that lies outside the file, raises `DolError`.
- `gekkotools.arch`: the Gekko CPU's bit-field registers, whose fields read and write as attributes:
  - `Cond` and `CondReg`
  - `MachineState`, the MSR
  - `XerReg`
  - `Bat`, which offers `start`, `end`, `block_length`, `contains` and `translate`
  - `QuantReg` and `QuantizedType`

  The module also has `ExceptionKind` and the constant `FREQUENCY`.
- `gekkotools.registers`: the full register file.
  - `Registers` with `User`, `Supervisor` and their groups.
  - The register enumerations `GPR`, `FPR`, `SPR` and `Reg`, plus `SEGMENT_REGISTERS`.
  - `all_registers()`.
  - Exception entry through `Registers.raise_exception`.
  - `MemoryManagement.setup_default_bats` loads the usual BAT setup.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Inspecting a .dol file

```
dolinfo path/to/game.dol
```

The command prints a summary line first, with the file name, its size and the entry point. Below it comes a table with one row for each text section, each data section and the bss section. Each row shows the file offset, the load address and the length, in hex and as a readable size. If the file cannot be opened or its header is truncated, the command prints an error and exits with status 1.

## Library use

```python
from gekkotools.dol import Dol

with open("game.dol", "rb") as stream:
    dol = Dol.read(stream)

print(hex(dol.entrypoint()))
for section in dol.text_sections():
    print(hex(section.target), len(section.content))
```

```python
from gekkotools.arch import ExceptionKind
from gekkotools.registers import Registers

regs = Registers()
regs.supervisor.memory.setup_default_bats()
regs.raise_exception(ExceptionKind.SYSCALL)
print(regs.pc)  # 0xFFF0_0C00
```

## What it does not do

The package describes the CPU's registers and how the CPU enters an exception, and it parses `.dol` files. It does not execute or disassemble instructions. It has no model of memory or devices and does not load an executable into memory. It offers no debugger or interactive interface.