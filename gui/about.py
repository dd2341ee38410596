about_html = """<h2>pfview</h2>

        <p>A live, read-only viewer for PennFat filesystem images.</p>

        <p><b>Features:</b></p>
        <ul>
        <li>Header geometry overview</li>
        <li>List of occupied FAT entries and their links</li>
        <li>Block contents as raw text or as directory entries</li>
        <li>Follows FAT chains from block to block</li>
        <li>Picks up changes to the image file automatically</li>
        </ul>

        <p><b>Keyboard Shortcuts:</b></p>
        <ul>
        <li>q - Quit</li>
        <li>r / d / t - Raw mode, directory mode, toggle</li>
        <li>j, Down / k, Up - Next or previous FAT entry</li>
        <li>l, Right - Jump to the linked block</li>
        </ul>

        <p align="center"><small>© 2026 Stephen P Smith | MIT License</small></p>
        """
