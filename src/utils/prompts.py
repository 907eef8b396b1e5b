"""Prompt templates for LLM interactions."""

from domain.model.schema import MORPHEME_TYPES, PARTS_OF_SPEECH

WORD_TREE_DERIVATIVE_COUNT = 7


def _build_analysis_system_prompt() -> str:
    pos = "|".join(PARTS_OF_SPEECH)
    morpheme_types = "|".join(MORPHEME_TYPES)
    return f"""You are a precise computational linguist. Output strict RFC 8259 JSON only — all keys and string values must use double quotes, no trailing commas, no comments, no markdown.

Schema:
{{"sentence":"<original>","sentenceTranslation":"<Ukrainian translation of entire sentence>","words":[{{"id":"<index string>","original":"<surface form>","lemma":"<base form>","partOfSpeech":"<{pos}>","translation":"<Ukrainian>","morphemes":[{{"text":"<text>","type":"<{morpheme_types}>","meaning":"<2-5 word description>","translationUk":"<Ukrainian, for prefix/suffix only>"}}],"isPunctuation":false,"groupId":"<optional, e.g. group-0>","groupMeaning":"<optional>","groupTranslation":"<optional Ukrainian>"}}]}}

Rules:
- Include every token exactly once, in sentence order. Punctuation: isPunctuation=true, morphemes=[].
- Every non-punctuation word needs at least one "root" morpheme. Order morphemes left→right.
- Always provide sentenceTranslation (natural Ukrainian).
- Provide translation (Ukrainian) for each word. Omit for function words with no standalone Ukrainian equivalent.
- Morpheme meaning: very short (2-5 words). Prefixes: what they add. Suffixes: what they form. Endings: grammatical function. Roots: core meaning.
- translationUk: only for prefix and suffix morphemes. Omit for root and ending.
- Detect phrasal verbs ("give up"), idioms ("piece of cake"), modal structures ("should have been"). For multi-word expressions: assign same groupId to all words, set partOfSpeech to phrasal_verb/idiom/modal_structure for each, include groupMeaning and groupTranslation on each word. Non-grouped words must not have group fields."""


def _build_word_tree_system_prompt() -> str:
    return f"""You are a precise computational linguist specializing in morphological derivation.
Given a root morpheme and the word it appeared in, generate a list of words derived from the same root.
Return raw JSON only, no markdown fences.

Schema:
{{
  "root": "<the root morpheme>",
  "rootMeaning": "<brief meaning of the root>",
  "derivatives": [
    {{
      "word": "<derived word>",
      "meaning": "<short definition>",
      "rootHighlight": [<startIndex>, <length>]
    }}
  ]
}}

Rules:
- Include {WORD_TREE_DERIVATIVE_COUNT} common English words sharing this root.
- Order from simplest (closest to root) to most complex (most affixes).
- "rootHighlight" must be the 0-based character index and length of the root within the word.
- Include the original source word in the list.
- Focus on real, commonly used English words."""


# Built once; the same instruction is reused for every attempt of a request.
ANALYSIS_SYSTEM_PROMPT = _build_analysis_system_prompt()
WORD_TREE_SYSTEM_PROMPT = _build_word_tree_system_prompt()


def build_analysis_user_prompt(sentence: str) -> str:
    """User message asking for the analysis of one sentence."""
    return f'Analyze this sentence: "{sentence}"'


def build_word_tree_user_prompt(root: str, word: str) -> str:
    """User message asking for the derivation tree of a root."""
    return f'Root morpheme: "{root}" (from the word "{word}"). Generate the word derivation tree.'


def build_analysis_messages(sentence: str) -> list[dict[str, str]]:
    """Chat messages for the sentence analysis task."""
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": build_analysis_user_prompt(sentence)},
    ]


def build_word_tree_messages(root: str, word: str) -> list[dict[str, str]]:
    """Chat messages for the derivation tree task."""
    return [
        {"role": "system", "content": WORD_TREE_SYSTEM_PROMPT},
        {"role": "user", "content": build_word_tree_user_prompt(root, word)},
    ]
