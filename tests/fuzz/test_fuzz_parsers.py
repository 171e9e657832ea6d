import random
import string
import pytest
from buildpod.REGISTRY.image_reference import ImageReference
from buildpod.PARSERS.template_parser import TemplateParser
from buildpod.MANAGERS.environment_manager import merge_without_duplicates
from buildpod.MODELS.pod import EnvVar
from buildpod.errors import MalformedImageReferenceError, TemplateLoadError

def random_string(length, alphabet=string.printable):
    return ''.join(random.choice(alphabet) for _ in range(length))

def test_fuzz_image_reference():
    alphabet = string.ascii_lowercase + string.digits + "/:@.-_ "
    for _ in range(500):
        content = random_string(random.randint(0, 40), alphabet)
        try:
            ref = ImageReference.parse(content)
        except MalformedImageReferenceError:
            continue
        # Anything accepted must serialize back to the same text
        assert str(ref) == content

def test_fuzz_template_parser():
    parser = TemplateParser()
    for _ in range(100):
        content = random_string(random.randint(0, 1000))
        try:
            parser.parse_pod_from_string(content)
        except TemplateLoadError:
            pass

def test_fuzz_merge_without_duplicates():
    names = list("ABCDEFGH")
    for _ in range(200):
        output = [EnvVar(name=n, value="o" + n) for n in random.sample(names, random.randint(0, 8))]
        source = [EnvVar(name=n, value="s" + n) for n in random.sample(names, random.randint(0, 8))]
        expected_len = len(output) + len([e for e in source if e.name not in {o.name for o in output}])
        original_names = [e.name for e in output]
        source_names = [e.name for e in source]

        merge_without_duplicates(source, output)

        assert len(output) == expected_len
        assert [e.name for e in output[:len(original_names)]] == original_names
        for e in output:
            assert e.value == ("s" + e.name if e.name in source_names else "o" + e.name)
        appended = [e.name for e in output[len(original_names):]]
        assert appended == [n for n in source_names if n not in original_names]
