import logging
import mmap
import os

from elftools.elf.elffile import ELFFile

logger = logging.getLogger(__name__)


# Matches in these sections are never interesting
SKIPPED_SECTIONS = ['.rela.dyn']


def mmapFile(f):
    # mmap refuses empty files
    if os.fstat(f.fileno()).st_size == 0:
        return b""
    return mmap.mmap(f.fileno(), 0, prot=mmap.PROT_READ)

def load(path):
    with open(path, 'rb') as f:
        # The mapping stays valid after the file is closed
        return mmapFile(f)


class ELFReader:
    def __init__(self, elf_path):
        logger.debug("Loading %s", elf_path)
        self.f = open(elf_path, 'rb')
        try:
            self.elf = ELFFile(self.f)
            self.data = mmapFile(self.f)
        except Exception:
            self.f.close()
            raise
        self.elf_path = elf_path

    def close(self):
        if isinstance(self.data, mmap.mmap):
            self.data.close()
        self.f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _loaded_segments(self):
        for segment in self.elf.iter_segments():
            if segment['p_type'] == 'PT_LOAD':  # Only consider loaded segments
                yield segment

    def find_virtual_address_for_offset(self, file_offset):
        """
        Finds the virtual address corresponding to the given file offset.
        """
        for segment in self._loaded_segments():
            segment_vaddr = segment['p_vaddr']
            segment_offset = segment['p_offset']
            segment_filesz = segment['p_filesz']

            # Check if the file offset falls within this segment's file range
            if segment_offset <= file_offset < segment_offset + segment_filesz:
                return segment_vaddr + (file_offset - segment_offset)

        raise ValueError(f"File offset {hex(file_offset)} not within any loaded segment.")

    def find_section_for_address(self, virtual_address):
        """
        Finds the name of the section containing the given virtual address.
        """
        for section in self.elf.iter_sections():
            section_vaddr = section['sh_addr']
            section_size = section['sh_size']

            if section_vaddr <= virtual_address < section_vaddr + section_size:
                return section.name

        raise ValueError(f"Virtual address {hex(virtual_address)} not within any section.")

    def virtual_address_for_match(self, file_offset):
        """
        Like `find_virtual_address_for_offset`, but returns None for offsets
        that are not loaded or that sit in one of `SKIPPED_SECTIONS`.
        """
        try:
            va = self.find_virtual_address_for_offset(file_offset)
        except ValueError:
            return None

        try:
            sn = self.find_section_for_address(va)
        except ValueError:
            # Loaded but not covered by a section header; still a real address
            return va

        if sn in SKIPPED_SECTIONS: # Avoid relocations
            logger.debug("Skipping 0x%X in %s", va, sn)
            return None
        return va
