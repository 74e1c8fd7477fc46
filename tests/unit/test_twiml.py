"""Unit tests for TwiML rendering."""
import xml.etree.ElementTree as ET

from app.services.speech.twiml import (
    DocumentKind,
    ProtocolDocument,
    escape_xml,
    generate_twiml_play_with_gather,
    generate_twiml_say_and_hangup,
    render_document,
)

ACTION_URL = "https://voice.example.com/voice"


class TestTwiml:
    """Test TwiML documents."""

    def test_play_with_gather(self):
        twiml = generate_twiml_play_with_gather(
            "https://voice.example.com/audio/abc", ACTION_URL, timeout=5, language="it-IT"
        )
        root = ET.fromstring(twiml.encode("utf-8"))

        assert root.tag == "Response"
        assert [child.tag for child in root] == ["Play", "Gather", "Redirect"]
        assert root.find("Play").text == "https://voice.example.com/audio/abc"
        gather = root.find("Gather")
        assert gather.get("input") == "speech dtmf"
        assert gather.get("action") == ACTION_URL
        assert gather.get("method") == "POST"
        assert gather.get("timeout") == "5"
        assert gather.get("language") == "it-IT"
        assert root.find("Redirect").text == ACTION_URL

    def test_say_and_hangup(self):
        twiml = generate_twiml_say_and_hangup("Ci scusi & arrivederci", language="it-IT", voice="Polly.Carla")
        root = ET.fromstring(twiml.encode("utf-8"))

        assert [child.tag for child in root] == ["Say", "Hangup"]
        say = root.find("Say")
        assert say.text == "Ci scusi & arrivederci"
        assert say.get("voice") == "Polly.Carla"
        assert root.find("Play") is None

    def test_escape_xml(self):
        assert escape_xml("<a href=\"x\">&'") == "&lt;a href=&quot;x&quot;&gt;&amp;&apos;"

    def test_render_continue_document(self):
        document = ProtocolDocument.play_and_gather("https://voice.example.com/audio/abc?x=1&y=2")
        root = ET.fromstring(render_document(document, ACTION_URL).encode("utf-8"))

        assert root.find("Play").text == "https://voice.example.com/audio/abc?x=1&y=2"
        assert root.find("Gather") is not None

    def test_render_terminate_document(self):
        document = ProtocolDocument.say_and_hangup("Arrivederci")
        root = ET.fromstring(render_document(document, ACTION_URL).encode("utf-8"))

        assert document.kind == DocumentKind.TERMINATE
        assert root.find("Say").text == "Arrivederci"
        assert root.find("Hangup") is not None
        assert root.find("Gather") is None
