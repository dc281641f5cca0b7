"""Misspell Check - Commonly misspelled English words in comments and strings."""

import io
import re
import tokenize
from typing import Dict, List

from ..core.check import IssueLocation
from .source_check import SourceCheck

# misspelling -> correction
MISSPELLINGS: Dict[str, str] = {
    "accomodate": "accommodate",
    "acheive": "achieve",
    "acknowlege": "acknowledge",
    "adress": "address",
    "agressive": "aggressive",
    "alot": "a lot",
    "amoung": "among",
    "apparantly": "apparently",
    "arguement": "argument",
    "assosiated": "associated",
    "begining": "beginning",
    "beleive": "believe",
    "calender": "calendar",
    "cancelation": "cancellation",
    "commited": "committed",
    "comparision": "comparison",
    "compatability": "compatibility",
    "completly": "completely",
    "concurent": "concurrent",
    "definately": "definitely",
    "dependancy": "dependency",
    "dependant": "dependent",
    "enviroment": "environment",
    "existance": "existence",
    "existant": "existent",
    "explicitely": "explicitly",
    "foward": "forward",
    "funtion": "function",
    "guarentee": "guarantee",
    "immediatly": "immediately",
    "independant": "independent",
    "initalize": "initialize",
    "intial": "initial",
    "lenght": "length",
    "neccessary": "necessary",
    "occured": "occurred",
    "occurence": "occurrence",
    "paramter": "parameter",
    "persistant": "persistent",
    "posible": "possible",
    "preceeding": "preceding",
    "recieve": "receive",
    "recieved": "received",
    "refered": "referred",
    "reponse": "response",
    "retreive": "retrieve",
    "seperate": "separate",
    "seperator": "separator",
    "succesful": "successful",
    "successfull": "successful",
    "sucess": "success",
    "supress": "suppress",
    "temporarly": "temporarily",
    "threshhold": "threshold",
    "transfered": "transferred",
    "truely": "truly",
    "unneccessary": "unnecessary",
    "untill": "until",
    "wich": "which",
    "writting": "writing",
}

WORD_RE = re.compile(r"[A-Za-z]+")

# Only prose is checked; identifiers belong to the code
_PROSE_TOKENS = (tokenize.COMMENT, tokenize.STRING)


class MisspellCheck(SourceCheck):
    """Finds commonly misspelled English words in comments and string literals."""

    name = "misspell"
    description = "Commonly misspelled English words in comments and strings"
    weight = 0.05

    def check_file(self, filename: str, source: str) -> List[IssueLocation]:
        issues = []
        try:
            tokens = list(tokenize.generate_tokens(io.StringIO(source).readline))
        except tokenize.TokenError as e:
            raise SyntaxError(str(e)) from e

        for token in tokens:
            if token.type not in _PROSE_TOKENS:
                continue
            for offset, text in enumerate(token.string.splitlines()):
                for word in WORD_RE.findall(text):
                    correction = MISSPELLINGS.get(word.lower())
                    if correction:
                        issues.append(IssueLocation(
                            filename=filename,
                            line_number=token.start[0] + offset,
                            message=f'"{word}" is a misspelling of "{correction}"',
                        ))
        return issues
