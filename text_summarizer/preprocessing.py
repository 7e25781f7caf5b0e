from __future__ import annotations
import re, base64, binascii, math, logging
from dataclasses import dataclass
from typing import Dict, List, Optional
from collections import Counter

from nltk.tokenize.punkt import PunktParameters, PunktSentenceTokenizer

from .datatypes import Document, Sentence

logger = logging.getLogger(__name__)


RE_BASE64  = re.compile(r'^[A-Za-z0-9+/]{20,}={0,2}$')   # long base64-like runs
RE_HEX     = re.compile(r'^[0-9a-fA-F]{16,}$')           # long hex (hashes)
RE_UUID    = re.compile(r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$')
RE_URL     = re.compile(r'^(?:https?|ftp)://', re.I)

# Abbreviations Punkt must not read as sentence ends (lowercase, no final period)
ABBREVIATIONS = {
    'dr', 'mr', 'mrs', 'ms', 'prof', 'sr', 'jr', 'st', 'mt', 'ft', 'gen', 'col', 'lt', 'sgt', 'capt',
    'gov', 'sen', 'rep', 'rev', 'hon', 'inc', 'ltd', 'co', 'corp', 'bros', 'dept', 'univ', 'assn',
    'vs', 'etc', 'e.g', 'i.e', 'cf', 'al', 'approx', 'est', 'fig', 'figs', 'vol', 'vols', 'ed', 'eds',
    'pp', 'ch', 'sec', 'u.s', 'u.k', 'u.n', 'a.m', 'p.m',
    'jan', 'feb', 'mar', 'apr', 'jun', 'jul', 'aug', 'sep', 'sept', 'oct', 'nov', 'dec',
}

def _sentence_tokenizer() -> PunktSentenceTokenizer:
    params = PunktParameters()
    params.abbrev_types = set(ABBREVIATIONS)
    return PunktSentenceTokenizer(params)

_PUNKT = _sentence_tokenizer()

# Bits per character; very "random" strings are usually junk
def shannon_entropy(s: str) -> float:
    if not s:
        return 0.0
    counts = Counter(s)
    n = len(s)
    return -sum((c/n) * math.log2(c/n) for c in counts.values())

def looks_like_binary_after_b64(s: str) -> bool:
    # clean base64 has a length that is a multiple of 4
    if len(s) < 20 or len(s) % 4 != 0:
        return False
    try:
        raw = base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError):
        return False
    if not raw:
        return False
    # more than 30% non-printable bytes (besides \t\n\r) means binary
    nonprint = sum(1 for b in raw if b < 32 and b not in (9,10,13)) + sum(1 for b in raw if b == 127)
    return (nonprint / len(raw)) > 0.30

def is_noise_token(tok: str) -> bool:
    if not tok:
        return True

    if RE_URL.search(tok):
        return False

    if RE_UUID.match(tok):
        return True
    if RE_HEX.match(tok) and len(tok) >= 24:  # SHA1/256 and friends
        return True
    if RE_BASE64.match(tok) or looks_like_binary_after_b64(tok):
        return True

    # long Latin runs with no vowel at all
    if len(tok) >= 20 and tok.isascii() and not any(ch in "aeiouyAEIOUY" for ch in tok):
        return True

    letters_digits = sum(ch.isalnum() for ch in tok)
    if len(tok) >= 16 and letters_digits / len(tok) > 0.95 and shannon_entropy(tok) > 4.0:
        return True

    return False

_WORD_RE = re.compile(r"\w+(?:'\w+)?")  # Unicode word characters

STOPWORDS = {
    # minimal English stopword set (extend as needed)
    'the','a','an','and','or','but','if','then','else','for','to','of','in','on','at','by','with','as',
    'is','are','was','were','be','been','being','this','that','these','those','it','its','from','into',
    'we','you','they','he','she','i','me','my','your','our','their','his','her','them','us','do','does',
    'did','not','no','so','than','too','very','can','could','should','would','will','shall'
}

@dataclass
class PreprocessConfig:
    lowercase: bool = True
    remove_stopwords: bool = True
    stemming: bool = True

def _simple_stem(token: str) -> str:
    t = token.lower()
    if len(t) > 4 and t.endswith("ies"):
        return t[:-3] + "y"     # stories -> story
    if len(t) > 3 and t.endswith("ing"):
        return t[:-3]           # playing -> play
    if len(t) > 2 and t.endswith("ed"):
        return t[:-2]           # worked -> work
    if len(t) > 3 and t.endswith("es"):
        return t[:-2]           # boxes -> box
    if len(t) > 3 and t.endswith("s") and not t.endswith("ss"):
        return t[:-1]           # books -> book
    return t

def segment(text: str) -> List[Sentence]:
    """
    Split text into sentences using Punkt boundary classification.

    Each Sentence keeps its character span in `text`; `text` on the Sentence is
    the span with surrounding whitespace trimmed. Trailing text without a
    terminator becomes the last sentence, so a text with no terminator at all
    is a single sentence. Empty or whitespace-only text yields [].

    Known limits: only . ? ! end sentences and the terminator must be followed
    by whitespace or punctuation, so unspaced CJK text ("第一句。第二句。")
    stays one sentence. A known abbreviation is never a boundary, even when
    it really ends the sentence ("... the U.S. He left.").
    """
    if not text or not text.strip():
        return []
    sentences: List[Sentence] = []
    for start, end in _PUNKT.span_tokenize(text):
        chunk = text[start:end]
        stripped = chunk.strip()
        if not stripped:
            continue
        lead = len(chunk) - len(chunk.lstrip())
        s_start = start + lead
        sentences.append(Sentence(idx=len(sentences), text=stripped,
                                  start=s_start, end=s_start + len(stripped)))
    return sentences

def tokenize(text: str, cfg: PreprocessConfig) -> List[str]:
    if cfg.lowercase:
        text = text.lower()
    toks = [m.group(0) for m in _WORD_RE.finditer(text)]
    toks = [t for t in toks if not is_noise_token(t)]
    if cfg.remove_stopwords:
        toks = [t for t in toks if t.lower() not in STOPWORDS]
    if cfg.stemming:
        toks = [_simple_stem(t) for t in toks]
    return toks

def _compute_tf(tokens: List[str]) -> Dict[str, float]:
    """Sublinear TF: 1 + log(count)"""
    return {t: (1.0 + math.log(c)) for t, c in Counter(tokens).items()}

def compute_idf(sentences: List[Sentence]) -> Dict[str, float]:
    """
    Smoothed IDF with every sentence treated as one 'document':
        log((1+N)/(1+DF)) + 1  (as scikit-learn does)
    """
    df: Counter = Counter()
    for s in sentences:
        df.update(set(s.tokens))

    N = len(sentences) if sentences else 1
    return {t: math.log((1.0 + N) / (1.0 + c)) + 1.0 for t, c in df.items()}

def compute_tfidf_vector(tokens: List[str], idf_scores: Dict[str, float]) -> Dict[str, float]:
    """TF-IDF(t,d) = TF(t,d) * IDF(t)"""
    tf_scores = _compute_tf(tokens)
    return {t: tf_scores[t] * idf_scores.get(t, 0.0) for t in tf_scores}

def build_document(text: str, cfg: Optional[PreprocessConfig] = None) -> Document:
    cfg = cfg or PreprocessConfig()
    sentences = segment(text)
    for s in sentences:
        s.tokens = tokenize(s.text, cfg)

    idf_scores = compute_idf(sentences)
    for s in sentences:
        s.tf_idf_vector = compute_tfidf_vector(s.tokens, idf_scores)

    logger.debug("segmented %d chars into %d sentences (%d distinct terms)",
                 len(text), len(sentences), len(idf_scores))
    return Document(raw_text=text, sentences=sentences)
