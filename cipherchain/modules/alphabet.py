"""
Signalling alphabets: Morse code and the NATO spelling alphabet.
"""

from ..framework import SymmetricModule, TransformModule, register_module

MORSE_CODE = {
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..",
    "1": ".----", "2": "..---", "3": "...--", "4": "....-", "5": ".....",
    "6": "-....", "7": "--...", "8": "---..", "9": "----.", "0": "-----",
    ".": ".-.-.-", ",": "--..--", "?": "..--..", "'": ".----.", "!": "-.-.--",
    "/": "-..-.", "(": "-.--.", ")": "-.--.-", "&": ".-...", ":": "---...",
    ";": "-.-.-.", "=": "-...-", "+": ".-.-.", "-": "-....-", "\"": ".-..-.",
    "@": ".--.-.",
}
REVERSE_MORSE_CODE = {v: k for k, v in MORSE_CODE.items()}
WORD_SEPARATOR = "/"

NATO_ALPHABET = {
    "A": "Alfa", "B": "Bravo", "C": "Charlie", "D": "Delta", "E": "Echo",
    "F": "Foxtrot", "G": "Golf", "H": "Hotel", "I": "India", "J": "Juliett",
    "K": "Kilo", "L": "Lima", "M": "Mike", "N": "November", "O": "Oscar",
    "P": "Papa", "Q": "Quebec", "R": "Romeo", "S": "Sierra", "T": "Tango",
    "U": "Uniform", "V": "Victor", "W": "Whiskey", "X": "X-ray", "Y": "Yankee",
    "Z": "Zulu",
    "0": "Zero", "1": "One", "2": "Two", "3": "Three", "4": "Four",
    "5": "Five", "6": "Six", "7": "Seven", "8": "Eight", "9": "Nine",
}


@register_module
class MorseCodeModule(TransformModule):
    """
    Letters separated by a space, words by ' / '. Characters without a
    Morse code are dropped on encode; unknown codes fail on decode.
    """

    kind = "morse"
    name = "Morse Code"
    description = "International Morse code."

    def encode(self, text: str) -> str:
        words = []
        for word in text.upper().split():
            codes = [MORSE_CODE[c] for c in word if c in MORSE_CODE]
            if codes:
                words.append(" ".join(codes))
        return f" {WORD_SEPARATOR} ".join(words)

    def decode(self, text: str) -> str:
        out = []
        for token in text.split():
            if token == WORD_SEPARATOR:
                out.append(" ")
            elif token in REVERSE_MORSE_CODE:
                out.append(REVERSE_MORSE_CODE[token])
            else:
                raise self.decode_error(f"Unknown Morse code '{token}'")
        return "".join(out)


@register_module
class SpellingAlphabetModule(SymmetricModule):
    """One-way: letters and digits become code words; others are dropped."""

    kind = "spelling"
    name = "Spelling Alphabet"
    description = "NATO phonetic spelling alphabet."

    def transform(self, text: str) -> str:
        return " ".join(NATO_ALPHABET[c] for c in text.upper() if c in NATO_ALPHABET)
