"""Pytest configuration and fixtures for mixtape importer tests."""

import pytest
from mixtapes.dataclasses import ImporterConfig, MixRecord, Track


@pytest.fixture
def output_dir(tmp_path):
    """Directory for written JSON records."""
    return tmp_path / "mixtapes"


@pytest.fixture
def temp_cache_dir(tmp_path):
    """Create temporary cache directory for tests."""
    return tmp_path / "test_cache"


@pytest.fixture
def test_config(output_dir):
    """Importer configuration with pacing disabled."""
    return ImporterConfig(
        base_url="https://www.artofthemix.org",
        member_id="3942",
        page_count=2,
        output_dir=str(output_dir),
        # Disable rate limiting for tests to avoid timing issues
        min_request_interval=0.0,
        humanize_request_interval=False,
        retry_delay=0.0,
    )


@pytest.fixture
def sample_listing_html():
    """Listing page linking mixes 7, 12, 7 (again) and 5."""
    return '''
    <html>
    <body>
        <div class="mix-list">
            <div class="mix"><a href="/mix/7">Midnight Drive</a></div>
            <div class="mix"><a href="/mix/12">Summer Tape</a></div>
            <div class="mix"><a href="https://www.artofthemix.org/mix/7"><img src="/img/7.jpg"></a></div>
            <div class="mix"><a href="/mix/5">Rainy Day Mix</a></div>
        </div>
        <div class="pager">
            <a href="/members/3942/mixes/1">1</a>
            <a href="/members/3942/mixes/2">2</a>
            <a href="/members/3942/mixes/3">3</a>
            <a href="/members/3942/mixes/44">last</a>
        </div>
    </body>
    </html>
    '''


@pytest.fixture
def sample_cd_html():
    """Detail page for a CD mix with a two-column track table."""
    return '''
    <html>
    <head><title>Midnight Drive by natalyesaurus | Art of the Mix</title></head>
    <body>
        <h1>Midnight   Drive
            by natalyesaurus</h1>
        <div class="mix-info">
            <b>Submit Date:</b> 7/4/1999<br>
            <b>Format:</b> CD<br>
            <p>Made for the long drive home; for Jenny Lee.</p>
        </div>
        <table class="tracklist">
            <tr>
                <td>Artist</td>
                <td>Song</td>
            </tr>
            <tr>
                <td><a href="/artist/portishead">Portishead</a></td>
                <td>Glory Box</td>
            </tr>
            <tr>
                <td>Massive Attack</td>
                <td>Teardrop</td>
            </tr>
            <tr>
                <td>Sigur R&oacute;s</td>
                <td>Hopp&iacute;polla</td>
            </tr>
            <tr>
                <td></td>
                <td></td>
            </tr>
        </table>
    </body>
    </html>
    '''


@pytest.fixture
def sample_cassette_html():
    """Detail page for a cassette with Side A and Side B sections."""
    return '''
    <html>
    <head><title>Summer Tape | Art of the Mix</title></head>
    <body>
        <h1>Summer Tape</h1>
        Submitted: 12/31/2003<br>
        Format: Cassette<br>
        <table>
            <tr><td colspan="2">Side A</td></tr>
            <tr><td>Portishead</td><td>Glory Box</td></tr>
            <tr><td>Massive Attack</td><td>Teardrop</td></tr>
            <tr><td colspan="2">Side B</td></tr>
            <tr><td>Air</td><td>La Femme d'Argent</td></tr>
            <tr><td>Stereolab</td><td>French Disko</td></tr>
        </table>
    </body>
    </html>
    '''


@pytest.fixture
def sample_list_items_html():
    """Detail page whose track list is a bulleted list."""
    return '''
    <html>
    <head><title>Rainy Day Mix by natalyesaurus | Art of the Mix</title></head>
    <body>
        <p>Submit Date: 3/9/2001</p>
        <ul>
            <li>Portishead - "Glory Box"</li>
            <li>Jay-Z &ndash; Song Cry</li>
            <li>Just a note about this mix</li>
            <li><b>Nina Simone</b> — Feeling Good</li>
        </ul>
    </body>
    </html>
    '''


@pytest.fixture
def sample_record():
    """A valid CD record."""
    return MixRecord(
        id="7",
        title="Midnight Drive",
        date="1999-07-04",
        format="cd",
        notes="for jenny lee",
        tracks=[
            Track(title="glory box", artist="portishead"),
            Track(title="teardrop", artist="massive attack"),
        ],
        source_url="https://www.artofthemix.org/mix/7",
    )
