from phashsort.core.models import HashAlgorithm

HASH_ALIASES = {
    "ahash": HashAlgorithm.AVERAGE,
    "phash": HashAlgorithm.PERCEPTUAL,
    "dhash": HashAlgorithm.DIFFERENCE,
    "whash": HashAlgorithm.WAVELET,
}

HASH_CHOICES = list(HASH_ALIASES.keys())

HASH_HELP_TEXT = (
    "Perceptual hash used as the image fingerprint:\n"
    + "".join(f"  {name} : {algorithm.description}\n" for name, algorithm in HASH_ALIASES.items())
    + "Only identical fingerprints count as duplicates.\n"
)

EPILOG_TEXT = """
Examples:
  Group duplicate images in a folder (numbered folders are created inside it)
  %(prog)s ~/Pictures/inbox

  Keep fingerprints between runs, so only new files are decoded next time
  %(prog)s ~/Pictures/inbox --persist

  Write group folders somewhere else and keep the database next to them
  %(prog)s ~/Pictures/inbox -p -o ~/Pictures/review --db ~/Pictures/review/fingerprints.db

  Only look at JPEG and PNG files, use the DCT hash
  %(prog)s ~/Pictures/inbox -x .jpg .jpeg .png --hash phash

Originals are never moved or deleted; duplicates are copied for review.
"""
